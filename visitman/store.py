"""
RecordStore — the single handle on members, shops and visits.

Owned by VisitmanConfig (apps.get_app_config("visitman").store) and passed
to the services. Reads return model instances or lists; writes are the only
place records are created or changed, and visits are append-only.

snapshot()/restore() speak the browser app's storage layout: four keyed
blobs (shop list, visit list, member list, active-session pointer).
"""

import logging
from datetime import date, datetime, timezone as dt_timezone

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import QuerySet

from visitman.days import calendar_day
from visitman.exceptions import DuplicateVisit, StorageUnavailable, ValidationError
from visitman.models import Member, Role, Shop, ShopCategory, VerificationStatus, Visit

logger = logging.getLogger(__name__)

SHOPS_KEY = "loyalty_shops"
VISITS_KEY = "loyalty_scans"
MEMBERS_KEY = "loyalty_users"
SESSION_KEY = "loyalty_logged_in_uid"


class RecordStore:
    """Explicit record store over the Django ORM."""

    # ======================================================================
    # Reads
    # ======================================================================

    def get_member(self, code: str) -> Member | None:
        try:
            return Member.objects.get(code=code)
        except Member.DoesNotExist:
            return None

    def get_shop(self, code: str) -> Shop | None:
        try:
            return Shop.objects.select_related("owner").get(code=code)
        except Shop.DoesNotExist:
            return None

    def shops(
        self,
        owner: Member | None = None,
        statuses: list[str] | None = None,
    ) -> QuerySet:
        qs = Shop.objects.select_related("owner")
        if owner is not None:
            qs = qs.filter(owner=owner)
        if statuses:
            qs = qs.filter(verification_status__in=statuses)
        return qs

    def visits(
        self,
        customer: Member | None = None,
        shop: Shop | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        first_day: date | None = None,
        end_day: date | None = None,
    ) -> list[Visit]:
        """
        Visits newest first.

        start/end limit the timestamp to [start, end); first_day/end_day limit
        the stored calendar day to [first_day, end_day).
        """
        qs = Visit.objects.select_related("shop", "customer")
        if customer is not None:
            qs = qs.filter(customer=customer)
        if shop is not None:
            qs = qs.filter(shop=shop)
        if start is not None:
            qs = qs.filter(timestamp__gte=start)
        if end is not None:
            qs = qs.filter(timestamp__lt=end)
        if first_day is not None:
            qs = qs.filter(day__gte=first_day)
        if end_day is not None:
            qs = qs.filter(day__lt=end_day)
        return list(qs)

    def has_visit_on(self, customer: Member, shop: Shop, day: date) -> bool:
        return Visit.objects.filter(customer=customer, shop=shop, day=day).exists()

    # ======================================================================
    # Writes
    # ======================================================================

    def create_member(self, **fields) -> Member:
        return self._write(Member.objects.create, **fields)

    def create_shop(self, **fields) -> Shop:
        return self._write(Shop.objects.create, **fields)

    def append_visit(
        self,
        shop: Shop,
        customer: Member,
        timestamp: datetime,
        transaction_ref: str = "",
        code: str | None = None,
    ) -> Visit:
        """
        Append a visit.

        The (customer, shop, day) unique constraint backs the
        one-visit-per-day gate; a violation surfaces as DuplicateVisit.
        """
        day = calendar_day(timestamp)
        fields = {
            "shop": shop,
            "customer": customer,
            "timestamp": timestamp,
            "day": day,
            "transaction_ref": transaction_ref or "",
        }
        if code:
            fields["code"] = code

        try:
            with transaction.atomic():
                return Visit.objects.create(**fields)
        except IntegrityError:
            if self.has_visit_on(customer, shop, day):
                raise DuplicateVisit(
                    customer_code=customer.code,
                    shop_code=shop.code,
                    day=day.isoformat(),
                )
            raise
        except DatabaseError as exc:
            logger.error("Visit append failed for shop %s: %s", shop.code, exc)
            raise StorageUnavailable(shop_code=shop.code) from exc

    def set_verification(
        self,
        shop: Shop,
        status: str,
        license_number: str | None = None,
    ) -> Shop:
        shop.verification_status = status
        update_fields = ["verification_status"]
        if license_number is not None:
            shop.license_number = license_number
            update_fields.append("license_number")
        self._write(shop.save, update_fields=update_fields)
        return shop

    def _write(self, func, *args, **kwargs):
        try:
            with transaction.atomic():
                return func(*args, **kwargs)
        except IntegrityError:
            raise
        except DatabaseError as exc:
            logger.error("Record store write failed: %s", exc)
            raise StorageUnavailable() from exc

    # ======================================================================
    # Snapshot / restore
    # ======================================================================

    def snapshot(self, active_member_code: str | None = None) -> dict:
        """Full record set in the browser storage layout."""
        return {
            SHOPS_KEY: [_shop_to_dict(s) for s in Shop.objects.select_related("owner").order_by("id")],
            VISITS_KEY: [
                _visit_to_dict(v)
                for v in Visit.objects.select_related("shop", "customer").order_by("-timestamp")
            ],
            MEMBERS_KEY: [_member_to_dict(m) for m in Member.objects.order_by("id")],
            SESSION_KEY: active_member_code,
        }

    def restore(self, data: dict) -> dict:
        """
        Import a snapshot (e.g. exported from the browser app).

        Records whose identifier already exists are skipped, as are shops
        without a known owner, visits that would break the one-visit-per-day
        rule and entries that cannot be read (not an object, bad timestamp).

        Raises:
            ValidationError: If the snapshot is not a mapping

        Returns:
            Counts of imported and skipped records plus the session pointer.
        """
        if not isinstance(data, dict):
            raise ValidationError(message="Snapshot must be a JSON object.")

        result = {"members": 0, "shops": 0, "visits": 0, "skipped": 0}
        restorers = (
            (MEMBERS_KEY, "members", self._restore_member),
            (SHOPS_KEY, "shops", self._restore_shop),
            (VISITS_KEY, "visits", self._restore_visit),
        )

        with transaction.atomic():
            for key, counter, restore_one in restorers:
                for raw in _records(data, key):
                    if isinstance(raw, dict) and restore_one(raw):
                        result[counter] += 1
                    else:
                        result["skipped"] += 1

        pointer = _text(data, SESSION_KEY)
        result["active_member"] = pointer if pointer and self.get_member(pointer) else None

        logger.info(
            "Snapshot restored: %(members)d members, %(shops)d shops, "
            "%(visits)d visits, %(skipped)d skipped",
            result,
        )
        return result

    def _restore_member(self, raw: dict) -> Member | None:
        code = _text(raw, "id")
        role = raw.get("role", Role.CUSTOMER)
        if not code or role not in Role.values or self.get_member(code):
            return None
        return self.create_member(
            code=code,
            name=raw.get("name", ""),
            email=raw.get("email", ""),
            role=role,
        )

    def _restore_shop(self, raw: dict) -> Shop | None:
        code = _text(raw, "id")
        owner = self.get_member(_text(raw, "ownerId"))
        if not code or owner is None or self.get_shop(code):
            return None

        category = raw.get("type", ShopCategory.FAST_FOOD)
        status = raw.get("verificationStatus", VerificationStatus.UNVERIFIED)
        return self.create_shop(
            code=code,
            name=raw.get("name", ""),
            category=category if category in ShopCategory.values else ShopCategory.FAST_FOOD,
            owner=owner,
            owner_email=raw.get("ownerEmail") or "",
            verification_status=(
                status if status in VerificationStatus.values else VerificationStatus.UNVERIFIED
            ),
            license_number=raw.get("licenseNumber") or "",
            secret_code=str(raw.get("secretCode", "")),
        )

    def _restore_visit(self, raw: dict) -> Visit | None:
        code = _text(raw, "id")
        shop = self.get_shop(_text(raw, "shopId"))
        customer = self.get_member(_text(raw, "customerId"))
        millis = raw.get("timestamp")
        if not code or shop is None or customer is None or millis is None:
            return None
        if Visit.objects.filter(code=code).exists():
            return None

        try:
            timestamp = datetime.fromtimestamp(int(millis) / 1000, tz=dt_timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            logger.warning("Skipping visit %s with unreadable timestamp %r", code, millis)
            return None
        if self.has_visit_on(customer, shop, calendar_day(timestamp)):
            logger.warning("Skipping duplicate-day visit %s during restore", code)
            return None
        return self.append_visit(
            shop,
            customer,
            timestamp,
            transaction_ref=raw.get("transactionId") or "",
            code=code,
        )


def _member_to_dict(member: Member) -> dict:
    return {
        "id": member.code,
        "name": member.name,
        "email": member.email,
        "role": member.role,
    }


def _shop_to_dict(shop: Shop) -> dict:
    data = {
        "id": shop.code,
        "name": shop.name,
        "type": shop.category,
        "ownerId": shop.owner.code,
        "ownerEmail": shop.owner_email,
        "verificationStatus": shop.verification_status,
        "secretCode": shop.secret_code,
    }
    if shop.license_number:
        data["licenseNumber"] = shop.license_number
    return data


def _visit_to_dict(visit: Visit) -> dict:
    return {
        "id": visit.code,
        "shopId": visit.shop.code,
        "customerId": visit.customer.code,
        "timestamp": int(visit.timestamp.timestamp() * 1000),
        "transactionId": visit.transaction_ref,
    }


def _records(data: dict, key: str) -> list:
    records = data.get(key) or []
    if not isinstance(records, list):
        logger.warning("Ignoring %s in snapshot: expected a list", key)
        return []
    return records


def _text(raw: dict, key: str) -> str:
    value = raw.get(key)
    return value if isinstance(value, str) else ""
