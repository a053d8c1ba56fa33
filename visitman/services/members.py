"""Member service — registration and lookup."""

import logging

from visitman.exceptions import ValidationError
from visitman.gates import Gates
from visitman.models import Member, Role
from visitman.services.base import StoreService
from visitman.signals import member_registered

logger = logging.getLogger(__name__)


class MemberService(StoreService):
    """Service for member registration."""

    def register(self, name: str, email: str, role: str = Role.CUSTOMER) -> Member:
        """
        Register a member. Role is fixed from here on.

        Raises:
            ValidationError: Missing name/e-mail or unknown role
        """
        Gates.required_fields(name=name, email=email)
        if role not in Role.values:
            raise ValidationError(
                message=f"Unknown role: {role}.",
                role=role,
                allowed=list(Role.values),
            )

        member = self.store.create_member(
            name=name.strip(),
            email=email.strip().lower(),
            role=role,
        )
        logger.info("Member %s registered as %s", member.code, member.role)
        member_registered.send(sender=Member, member=member)
        return member

    def get(self, code: str) -> Member:
        """
        Raises:
            MemberNotFound
        """
        return self._member(code)
