"""
Visitman Gates - Validation rules.

G1: ShopExists - Shop code resolves to a registered shop
G2: SecretCodeMatch - Typed secret equals the shop's code exactly
G3: OneVisitPerDay - At most one visit per (customer, shop, calendar day)
G4: VerificationTransition - Verification state machine edges per role
G5: VisitDateAllowed - Future visit dates (only when REJECT_FUTURE_VISITS)
G6: RequiredFields - Registration/submission fields are non-empty
"""

import logging
from dataclasses import dataclass
from datetime import date

from visitman.conf import visitman_settings
from visitman.exceptions import (
    DuplicateVisit,
    InvalidCode,
    ShopNotFound,
    ValidationError,
    VisitmanError,
)
from visitman.models import Role, VerificationStatus

logger = logging.getLogger(__name__)


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Visitman validation gates."""

    # =========================================================================
    # G1: Shop Exists
    # =========================================================================

    @classmethod
    def shop_exists(cls, shop, shop_code: str) -> GateResult:
        """
        G1: Shop code must resolve to a registered shop.

        Args:
            shop: Shop looked up by the caller (None when not found)
            shop_code: Code that was looked up

        Raises:
            ShopNotFound: If shop is None
        """
        if shop is None:
            raise ShopNotFound(shop_code=shop_code, gate="G1_ShopExists")
        return GateResult(True, "G1_ShopExists")

    @classmethod
    def check_shop_exists(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.shop_exists(*args, **kwargs)
            return True
        except VisitmanError:
            return False

    # =========================================================================
    # G2: Secret Code Match
    # =========================================================================

    @classmethod
    def secret_code_match(cls, shop, secret_code: str | None) -> GateResult:
        """
        G2: Typed secret must equal the shop's secret code.

        Exact, case-sensitive string comparison. The check confirms presence
        at the counter; it is not a security control.

        Raises:
            InvalidCode: On any mismatch
        """
        if secret_code is None or secret_code != shop.secret_code:
            logger.warning("G2_SecretCodeMatch: mismatch for shop %s", shop.code)
            raise InvalidCode(shop_code=shop.code, gate="G2_SecretCodeMatch")
        return GateResult(True, "G2_SecretCodeMatch")

    @classmethod
    def check_secret_code_match(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.secret_code_match(*args, **kwargs)
            return True
        except VisitmanError:
            return False

    # =========================================================================
    # G3: One Visit Per Day
    # =========================================================================

    @classmethod
    def one_visit_per_day(cls, store, customer, shop, day: date) -> GateResult:
        """
        G3: No existing visit for (customer, shop) on `day`.

        Args:
            store: RecordStore
            customer: Member
            shop: Shop
            day: Calendar day from visitman.days

        Raises:
            DuplicateVisit: If a visit is already recorded that day
        """
        if store.has_visit_on(customer, shop, day):
            logger.warning(
                "G3_OneVisitPerDay: %s already visited %s on %s",
                customer.code,
                shop.code,
                day.isoformat(),
            )
            raise DuplicateVisit(
                customer_code=customer.code,
                shop_code=shop.code,
                day=day.isoformat(),
                gate="G3_OneVisitPerDay",
            )
        return GateResult(True, "G3_OneVisitPerDay")

    @classmethod
    def check_one_visit_per_day(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.one_visit_per_day(*args, **kwargs)
            return True
        except VisitmanError:
            return False

    # =========================================================================
    # G4: Verification Transition
    # =========================================================================

    ALLOWED_TRANSITIONS = {
        Role.OWNER.value: {
            (VerificationStatus.UNVERIFIED.value, VerificationStatus.PENDING.value),
        },
        Role.ADMIN.value: {
            (VerificationStatus.PENDING.value, VerificationStatus.VERIFIED.value),
            (VerificationStatus.PENDING.value, VerificationStatus.UNVERIFIED.value),
            (VerificationStatus.VERIFIED.value, VerificationStatus.UNVERIFIED.value),
        },
    }

    @classmethod
    def verification_transition(cls, current: str, target: str, role: str) -> GateResult:
        """
        G4: Verification edge must be allowed for the acting role.

        owner: unverified -> pending (license submission)
        admin: pending -> verified | unverified, verified -> unverified

        Raises:
            ValidationError: INVALID_TRANSITION for any other edge
        """
        allowed = cls.ALLOWED_TRANSITIONS.get(str(role), set())
        if (str(current), str(target)) not in allowed:
            raise ValidationError(
                "INVALID_TRANSITION",
                f"Cannot move shop from '{current}' to '{target}' as {role}.",
                current=current,
                target=target,
                role=role,
                gate="G4_VerificationTransition",
            )
        return GateResult(True, "G4_VerificationTransition")

    @classmethod
    def check_verification_transition(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.verification_transition(*args, **kwargs)
            return True
        except VisitmanError:
            return False

    # =========================================================================
    # G5: Visit Date Allowed
    # =========================================================================

    @classmethod
    def visit_date_allowed(cls, visit_date: date, today: date) -> GateResult:
        """
        G5: Visit date after today is rejected when REJECT_FUTURE_VISITS is on.

        With the setting off, future dates pass (the input form only hints
        at the allowed range).

        Raises:
            ValidationError: VISIT_DATE_IN_FUTURE
        """
        if visitman_settings.REJECT_FUTURE_VISITS and visit_date > today:
            raise ValidationError(
                "VISIT_DATE_IN_FUTURE",
                visit_date=visit_date.isoformat(),
                today=today.isoformat(),
                gate="G5_VisitDateAllowed",
            )
        return GateResult(True, "G5_VisitDateAllowed")

    @classmethod
    def check_visit_date_allowed(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.visit_date_allowed(*args, **kwargs)
            return True
        except VisitmanError:
            return False

    # =========================================================================
    # G6: Required Fields
    # =========================================================================

    @classmethod
    def required_fields(cls, **fields) -> GateResult:
        """
        G6: Every given field must be a non-blank string.

        Raises:
            ValidationError: Listing the missing field names
        """
        missing = [name for name, value in fields.items() if not str(value or "").strip()]
        if missing:
            raise ValidationError(
                message=f"Missing required field(s): {', '.join(missing)}.",
                missing=missing,
                gate="G6_RequiredFields",
            )
        return GateResult(True, "G6_RequiredFields")

    @classmethod
    def check_required_fields(cls, **fields) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.required_fields(**fields)
            return True
        except VisitmanError:
            return False
