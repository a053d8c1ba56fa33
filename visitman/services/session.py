"""
Session/role controller.

Holds at most one active member. The active-session pointer lives in any
mutable mapping: request.session in views, a plain dict elsewhere.

Roles gate views through capabilities, never through role-string checks
at the call site:

    session.require(Capability.RECORD_VISIT)
    session.dashboard()   # dispatches on the active role
"""

import enum
import logging
from collections.abc import MutableMapping
from datetime import datetime

from visitman.exceptions import PermissionDenied
from visitman.models import Member, Role
from visitman.services import dashboards
from visitman.services.base import StoreService
from visitman.services.members import MemberService
from visitman.store import SESSION_KEY

logger = logging.getLogger(__name__)


class Capability(enum.Enum):
    VIEW_HISTORY = "view_history"
    RECORD_VISIT = "record_visit"
    MANAGE_SHOPS = "manage_shops"
    REVIEW_SHOPS = "review_shops"
    VIEW_ALL_SHOPS = "view_all_shops"


ROLE_CAPABILITIES: dict[str, frozenset[Capability]] = {
    Role.CUSTOMER.value: frozenset({Capability.VIEW_HISTORY, Capability.RECORD_VISIT}),
    Role.OWNER.value: frozenset({Capability.MANAGE_SHOPS}),
    Role.ADMIN.value: frozenset({Capability.REVIEW_SHOPS, Capability.VIEW_ALL_SHOPS}),
}

DASHBOARD_BUILDERS = {
    Role.CUSTOMER.value: dashboards.customer_dashboard,
    Role.OWNER.value: dashboards.owner_dashboard,
    Role.ADMIN.value: dashboards.admin_dashboard,
}


def capabilities_for(role: str) -> frozenset[Capability]:
    return ROLE_CAPABILITIES.get(str(role), frozenset())


class SessionController(StoreService):
    """Tracks the active member over a session mapping."""

    def __init__(self, storage: MutableMapping, store=None):
        super().__init__(store)
        self.storage = storage

    @property
    def current(self) -> Member | None:
        """Active member, or None. A dangling pointer is cleared."""
        code = self.storage.get(SESSION_KEY)
        if not code:
            return None
        member = self.store.get_member(code)
        if member is None:
            logger.warning("Session pointer %s has no member; clearing", code)
            self.storage.pop(SESSION_KEY, None)
        return member

    def login(self, code: str) -> Member:
        """
        Raises:
            MemberNotFound
        """
        member = self._member(code)
        self.storage[SESSION_KEY] = member.code
        return member

    def register(self, name: str, email: str, role: str = Role.CUSTOMER) -> Member:
        """Register a member and make them the active one."""
        member = MemberService(self.store).register(name, email, role)
        return self.login(member.code)

    def logout(self) -> None:
        self.storage.pop(SESSION_KEY, None)

    def can(self, capability: Capability) -> bool:
        member = self.current
        return member is not None and capability in capabilities_for(member.role)

    def require(self, capability: Capability) -> Member:
        """
        Active member holding `capability`.

        Raises:
            PermissionDenied: No active member or missing capability
        """
        member = self.current
        if member is None:
            raise PermissionDenied(message="Not logged in.", capability=capability.value)
        if capability not in capabilities_for(member.role):
            raise PermissionDenied(
                member_code=member.code,
                role=member.role,
                capability=capability.value,
            )
        return member

    def dashboard(self, now: datetime | None = None, **options):
        """
        Primary view data for the active member's role.

        Options are passed to the role's builder (week_offset for customers;
        category/query/sort for owners).

        Raises:
            PermissionDenied: No active member
        """
        member = self.current
        if member is None:
            raise PermissionDenied(message="Not logged in.")
        builder = DASHBOARD_BUILDERS[str(member.role)]
        return builder(self.store, member, now=now, **options)
