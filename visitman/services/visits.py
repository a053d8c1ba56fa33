"""
Visit recorder — validate and append visits.

Every path ends in record_visit(), which runs the gates in order:
shop exists (G1), secret code (G2, code-entry paths only), visit date (G5),
one visit per day (G3). Rejections append nothing.
"""

import logging
from datetime import date, datetime

from django.utils import timezone

from visitman.days import calendar_day, today, visit_timestamp
from visitman.exceptions import PermissionDenied, ValidationError
from visitman.gates import Gates
from visitman.models import Member, Role, Shop, Visit
from visitman.scan import is_scan_token, parse_scan_token
from visitman.services.base import StoreService
from visitman.signals import visit_recorded

logger = logging.getLogger(__name__)


def parse_visit_date(value: date | str | None, now: datetime | None = None) -> date:
    """Visit date from a date, an ISO "YYYY-MM-DD" string or None (today)."""
    if value is None or value == "":
        return today(now)
    if isinstance(value, datetime):
        return calendar_day(value)
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(message=f"Invalid visit date: {value!r}.", visit_date=value)


class VisitService(StoreService):
    """Service for recording and listing visits."""

    def record_visit(
        self,
        customer: Member | str,
        shop: Shop | str,
        transaction_ref: str = "",
        visit_date: date | str | None = None,
        secret_code: str | None = None,
        now: datetime | None = None,
    ) -> Visit:
        """
        Record a visit.

        Args:
            customer: Member or member code
            shop: Shop or shop code
            transaction_ref: Free text, unvalidated (may be empty)
            visit_date: Calendar day of the visit (default today)
            secret_code: Typed secret; None only for paths that do not
                collect one (owner check-in)
            now: Current instant (default timezone.now())

        Returns:
            The appended Visit. Its timestamp is visit_date at the current
            local time of day.

        Raises:
            ShopNotFound, InvalidCode, ValidationError, DuplicateVisit,
            MemberNotFound, StorageUnavailable,
            PermissionDenied: If the visitor is not a customer
        """
        now = now or timezone.now()
        shop = self._shop(shop)
        if secret_code is not None:
            Gates.secret_code_match(shop, secret_code)
        customer = self._member(customer)
        if customer.role != Role.CUSTOMER:
            raise PermissionDenied(member_code=customer.code, role=customer.role, action="record_visit")

        day = parse_visit_date(visit_date, now)
        Gates.visit_date_allowed(day, today(now))

        timestamp = visit_timestamp(day, now)
        Gates.one_visit_per_day(self.store, customer, shop, calendar_day(timestamp))

        visit = self.store.append_visit(
            shop,
            customer,
            timestamp,
            transaction_ref=transaction_ref,
        )
        logger.info(
            "Visit %s recorded: %s at %s on %s",
            visit.code,
            customer.code,
            shop.code,
            visit.day.isoformat(),
        )
        visit_recorded.send(sender=Visit, visit=visit)
        return visit

    def direct_check_in(
        self,
        customer: Member | str,
        shop_input: str,
        secret_code: str,
        transaction_ref: str = "",
        visit_date: date | str | None = None,
        now: datetime | None = None,
    ) -> Visit:
        """
        Check in with a typed shop ID plus the secret code.

        Manual entry trims surrounding whitespace from both values. A scanned
        token in the shop field goes through scan_check_in instead, where the
        secret is compared untouched.
        """
        shop_code = (shop_input or "").strip()
        if is_scan_token(shop_code):
            return self.scan_check_in(
                customer,
                shop_code,
                secret_code,
                transaction_ref=transaction_ref,
                visit_date=visit_date,
                now=now,
            )

        Gates.required_fields(shop_id=shop_code)
        return self.record_visit(
            customer,
            shop_code,
            transaction_ref=transaction_ref,
            visit_date=visit_date,
            secret_code=(secret_code or "").strip(),
            now=now,
        )

    def scan_check_in(
        self,
        customer: Member | str,
        token: str,
        secret_code: str,
        transaction_ref: str = "",
        visit_date: date | str | None = None,
        now: datetime | None = None,
    ) -> Visit:
        """Check in from a scanned "loyalty_scan:<shop>" token plus the typed secret (exact)."""
        return self.record_visit(
            customer,
            parse_scan_token(token),
            transaction_ref=transaction_ref,
            visit_date=visit_date,
            secret_code=secret_code if secret_code is not None else "",
            now=now,
        )

    def owner_check_in(
        self,
        owner: Member | str,
        shop: Shop | str,
        customer: Member | str,
        transaction_ref: str = "",
        visit_date: date | str | None = None,
        now: datetime | None = None,
    ) -> Visit:
        """
        Record a visit from the owner's dashboard (no secret code).

        Raises:
            PermissionDenied: If owner does not own the shop
        """
        owner = self._member(owner)
        shop = self._shop(shop)
        if shop.owner_id != owner.pk:
            raise PermissionDenied(member_code=owner.code, shop_code=shop.code)
        return self.record_visit(
            customer,
            shop,
            transaction_ref=transaction_ref,
            visit_date=visit_date,
            now=now,
        )

    def has_visited_on(
        self,
        customer: Member | str,
        shop: Shop | str,
        visit_date: date | str,
    ) -> bool:
        """Whether a visit already exists that day (drives the "already visited" notice)."""
        return self.store.has_visit_on(
            self._member(customer),
            self._shop(shop),
            parse_visit_date(visit_date),
        )

    def history(
        self,
        customer: Member | str,
        shop: Shop | str | None = None,
        limit: int | None = None,
    ) -> list[Visit]:
        """Customer's visits, newest first."""
        visits = self.store.visits(
            customer=self._member(customer),
            shop=self._shop(shop) if shop is not None else None,
        )
        return visits[:limit] if limit else visits

    def last_visit(self, customer: Member | str, shop: Shop | str) -> Visit | None:
        visits = self.history(customer, shop, limit=1)
        return visits[0] if visits else None

    def scan_count(self, shop: Shop | str) -> int:
        """Total visits recorded at a shop."""
        return len(self.store.visits(shop=self._shop(shop)))
