"""
Shop service — registration, listing and the verification state machine.

Verification states:
    unverified --(owner submits license)--> pending
    pending    --(admin approves)---------> verified
    pending    --(admin rejects)----------> unverified
    verified   --(admin revokes)----------> unverified

The badge is cosmetic for customers: any shop can record visits.
"""

import logging
import secrets

from visitman.conf import visitman_settings
from visitman.exceptions import PermissionDenied, ValidationError
from visitman.gates import Gates
from visitman.models import Member, Role, Shop, ShopCategory, VerificationStatus
from visitman.services.base import StoreService
from visitman.signals import shop_registered, shop_verification_changed

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "name": ["name", "id"],
    "newest": ["-created_at", "-id"],
}


def generate_secret_code(digits: int | None = None) -> str:
    """Random decimal code with no leading zero (1000-9999 for 4 digits)."""
    digits = digits or visitman_settings.SECRET_CODE_DIGITS
    low = 10 ** (digits - 1)
    return str(low + secrets.randbelow(9 * low))


class ShopService(StoreService):
    """Service for shop operations."""

    # ======================================================================
    # Registration
    # ======================================================================

    def register(
        self,
        owner: Member | str,
        name: str,
        owner_email: str,
        category: str = ShopCategory.FAST_FOOD,
        secret_code: str = "",
    ) -> Shop:
        """
        Register a new shop for an owner.

        Args:
            owner: Member with the owner role (or code)
            name: Shop name
            owner_email: Contact e-mail for the registration notice
            category: fast-food | hotel | retail
            secret_code: Shop-chosen code; blank means a random one

        Returns:
            Created Shop (unverified)

        Raises:
            ValidationError: Missing name/e-mail or unknown category
            PermissionDenied: If the member is not an owner
        """
        owner = self._member(owner)
        if owner.role != Role.OWNER:
            raise PermissionDenied(member_code=owner.code, action="register_shop")

        Gates.required_fields(name=name, owner_email=owner_email)
        if category not in ShopCategory.values:
            raise ValidationError(
                message=f"Unknown shop category: {category}.",
                category=category,
                allowed=list(ShopCategory.values),
            )

        shop = self.store.create_shop(
            name=name.strip(),
            category=category,
            owner=owner,
            owner_email=owner_email.strip(),
            secret_code=(secret_code or "").strip() or generate_secret_code(),
        )
        logger.info("Shop %s registered by %s", shop.code, owner.code)
        shop_registered.send(sender=Shop, shop=shop)
        return shop

    # ======================================================================
    # Verification
    # ======================================================================

    def submit_verification(
        self,
        owner: Member | str,
        shop: Shop | str,
        license_number: str,
    ) -> Shop:
        """
        Owner submits a license for review (unverified -> pending).

        Raises:
            ValidationError: Empty license (state stays unverified) or the
                shop is not unverified
            PermissionDenied: If the member does not own the shop
        """
        owner = self._member(owner)
        shop = self._shop(shop)
        if shop.owner_id != owner.pk:
            raise PermissionDenied(member_code=owner.code, shop_code=shop.code)

        Gates.required_fields(license_number=license_number)
        return self._transition(
            shop,
            VerificationStatus.PENDING,
            role=owner.role,
            actor_code=owner.code,
            license_number=license_number.strip(),
        )

    def approve(self, admin: Member | str, shop: Shop | str) -> Shop:
        """Admin approval (pending -> verified)."""
        return self._admin_transition(admin, shop, VerificationStatus.VERIFIED)

    def reject(self, admin: Member | str, shop: Shop | str) -> Shop:
        """Admin rejection (pending or verified -> unverified)."""
        return self._admin_transition(admin, shop, VerificationStatus.UNVERIFIED)

    def revoke(self, admin: Member | str, shop: Shop | str) -> Shop:
        """Admin revocation; same edge as reject, offered on verified shops."""
        return self._admin_transition(admin, shop, VerificationStatus.UNVERIFIED)

    def _admin_transition(self, admin: Member | str, shop: Shop | str, target: str) -> Shop:
        admin = self._member(admin)
        if admin.role != Role.ADMIN:
            raise PermissionDenied(member_code=admin.code, action="review_shop")
        return self._transition(self._shop(shop), target, role=admin.role, actor_code=admin.code)

    def review(self, shop: Shop | str, target: str, reviewer: str = "") -> Shop:
        """
        Admin-role transition for staff without a Member record (Django admin).

        Args:
            shop: Shop or shop code
            target: VerificationStatus value
            reviewer: Staff username for the log
        """
        return self._transition(self._shop(shop), target, role=Role.ADMIN, actor_code=reviewer)

    def _transition(
        self,
        shop: Shop,
        target: str,
        role: str,
        actor_code: str,
        license_number: str | None = None,
    ) -> Shop:
        old = shop.verification_status
        Gates.verification_transition(old, target, role)

        self.store.set_verification(shop, target, license_number=license_number)
        logger.info(
            "Shop %s verification: %s -> %s (by %s)",
            shop.code,
            old,
            target,
            actor_code or "-",
        )
        shop_verification_changed.send(
            sender=Shop,
            shop=shop,
            old=old,
            new=target,
            actor_code=actor_code,
        )
        return shop

    # ======================================================================
    # Listing
    # ======================================================================

    def get(self, code: str) -> Shop:
        return self._shop(code)

    def search(
        self,
        owner: Member | str | None = None,
        category: str | None = None,
        query: str = "",
        sort: str = "name",
    ) -> list[Shop]:
        """
        Filter and sort shops.

        Args:
            owner: Restrict to one owner's shops
            category: Category value, or None/"all" for every category
            query: Case-insensitive substring of the shop name
            sort: "name" or "newest"
        """
        qs = self.store.shops(owner=self._member(owner) if owner is not None else None)
        if category and category != "all":
            qs = qs.filter(category=category)
        if query:
            qs = qs.filter(name__icontains=query.strip())
        return list(qs.order_by(*SORT_ORDERS.get(sort, SORT_ORDERS["name"])))

    def category_counts(self, owner: Member | str | None = None) -> dict[str, int]:
        """Shop count per category plus "all"."""
        shops = self.store.shops(owner=self._member(owner) if owner is not None else None)
        counts = {"all": 0, **{value: 0 for value in ShopCategory.values}}
        for category in shops.values_list("category", flat=True):
            counts["all"] += 1
            counts[category] = counts.get(category, 0) + 1
        return counts

    def review_queue(self) -> list[Shop]:
        """Shops an admin can act on: pending and verified."""
        return list(
            self.store.shops(
                statuses=[VerificationStatus.PENDING, VerificationStatus.VERIFIED]
            ).order_by("name", "id")
        )

    def unverified_for(self, owner: Member | str) -> list[Shop]:
        return list(
            self.store.shops(
                owner=self._member(owner),
                statuses=[VerificationStatus.UNVERIFIED],
            )
        )
