"""
Tests for Visitman gates and error structure.

G1: ShopExists
G2: SecretCodeMatch
G3: OneVisitPerDay
G4: VerificationTransition
G5: VisitDateAllowed
G6: RequiredFields
"""

import logging
from datetime import date

import pytest
from django.test import override_settings

from visitman.exceptions import (
    DuplicateVisit,
    InvalidCode,
    ShopNotFound,
    StorageUnavailable,
    ValidationError,
    VisitmanError,
)
from visitman.gates import GateResult, Gates
from visitman.tests.conftest import WEEK_SATURDAY, at


pytestmark = pytest.mark.django_db


class TestVisitmanError:
    def test_default_code_and_message(self):
        exc = ShopNotFound(shop_code="shop_x")
        assert exc.code == "SHOP_NOT_FOUND"
        assert exc.message == "Shop not found"
        assert exc.data == {"shop_code": "shop_x"}

    def test_as_dict(self):
        exc = ValidationError(message="Missing required field(s): name.", missing=["name"])
        assert exc.as_dict() == {
            "code": "VALIDATION_ERROR",
            "message": "Missing required field(s): name.",
            "data": {"missing": ["name"]},
        }

    def test_explicit_code_overrides_default(self):
        exc = ValidationError("INVALID_SCAN_TOKEN")
        assert exc.code == "INVALID_SCAN_TOKEN"
        assert exc.message == "Not a loyalty scan code"

    def test_all_subclass_visitman_error(self):
        for cls in (ShopNotFound, InvalidCode, DuplicateVisit, ValidationError, StorageUnavailable):
            assert issubclass(cls, VisitmanError)

    def test_str_includes_code(self):
        assert str(DuplicateVisit()) == "[DUPLICATE_VISIT] A visit is already recorded for this shop on this date"


class TestG1ShopExists:
    def test_found_passes(self, shop):
        result = Gates.shop_exists(shop, "shop_sunny")
        assert result == GateResult(True, "G1_ShopExists")

    def test_missing_raises(self):
        with pytest.raises(ShopNotFound) as exc:
            Gates.shop_exists(None, "shop_nope")
        assert exc.value.data["shop_code"] == "shop_nope"

    def test_check_variant(self, shop):
        assert Gates.check_shop_exists(shop, "shop_sunny") is True
        assert Gates.check_shop_exists(None, "shop_nope") is False


class TestG2SecretCodeMatch:
    def test_exact_match_passes(self, shop):
        assert Gates.secret_code_match(shop, "4521").passed is True

    @pytest.mark.parametrize("typed", ["0000", "", " 4521", "45210"])
    def test_mismatch_raises(self, shop, typed):
        with pytest.raises(InvalidCode):
            Gates.secret_code_match(shop, typed)

    def test_case_sensitive(self, hotel):
        assert Gates.check_secret_code_match(hotel, "Blue7") is True
        assert Gates.check_secret_code_match(hotel, "blue7") is False

    def test_none_is_mismatch(self, shop):
        assert Gates.check_secret_code_match(shop, None) is False

    def test_log_never_contains_secret(self, shop, caplog):
        with caplog.at_level(logging.WARNING, logger="visitman.gates"):
            Gates.check_secret_code_match(shop, "0000")
        assert "shop_sunny" in caplog.text
        assert "4521" not in caplog.text
        assert "0000" not in caplog.text


class TestG3OneVisitPerDay:
    def test_first_visit_passes(self, store, customer, shop):
        assert Gates.check_one_visit_per_day(store, customer, shop, WEEK_SATURDAY) is True

    def test_second_visit_same_day_raises(self, store, customer, shop):
        store.append_visit(shop, customer, at(WEEK_SATURDAY, 9))

        with pytest.raises(DuplicateVisit) as exc:
            Gates.one_visit_per_day(store, customer, shop, WEEK_SATURDAY)
        assert exc.value.data["day"] == "2026-10-17"

    def test_other_customer_unaffected(self, store, customer, customer_b, shop):
        store.append_visit(shop, customer, at(WEEK_SATURDAY, 9))
        assert Gates.check_one_visit_per_day(store, customer_b, shop, WEEK_SATURDAY) is True


class TestG4VerificationTransition:
    @pytest.mark.parametrize(
        "current,target,role",
        [
            ("unverified", "pending", "owner"),
            ("pending", "verified", "admin"),
            ("pending", "unverified", "admin"),
            ("verified", "unverified", "admin"),
        ],
    )
    def test_allowed_edges(self, current, target, role):
        assert Gates.verification_transition(current, target, role).passed is True

    @pytest.mark.parametrize(
        "current,target,role",
        [
            ("unverified", "verified", "admin"),
            ("unverified", "verified", "owner"),
            ("pending", "verified", "owner"),
            ("verified", "pending", "owner"),
            ("unverified", "pending", "customer"),
            ("pending", "pending", "admin"),
        ],
    )
    def test_rejected_edges(self, current, target, role):
        with pytest.raises(ValidationError) as exc:
            Gates.verification_transition(current, target, role)
        assert exc.value.code == "INVALID_TRANSITION"


class TestG5VisitDateAllowed:
    def test_future_allowed_by_default(self):
        assert Gates.check_visit_date_allowed(date(2026, 10, 20), WEEK_SATURDAY) is True

    @override_settings(VISITMAN={"REJECT_FUTURE_VISITS": True})
    def test_future_rejected_when_enabled(self):
        with pytest.raises(ValidationError) as exc:
            Gates.visit_date_allowed(date(2026, 10, 20), WEEK_SATURDAY)
        assert exc.value.code == "VISIT_DATE_IN_FUTURE"

    @override_settings(VISITMAN={"REJECT_FUTURE_VISITS": True})
    def test_today_and_past_pass_when_enabled(self):
        assert Gates.check_visit_date_allowed(WEEK_SATURDAY, WEEK_SATURDAY) is True
        assert Gates.check_visit_date_allowed(date(2026, 10, 1), WEEK_SATURDAY) is True


class TestG6RequiredFields:
    def test_all_present(self):
        assert Gates.required_fields(name="Sunny's Pizza", owner_email="a@b.c").passed is True

    def test_blank_and_whitespace_missing(self):
        with pytest.raises(ValidationError) as exc:
            Gates.required_fields(name="  ", owner_email="", license_number="L-1")
        assert exc.value.data["missing"] == ["name", "owner_email"]

    def test_none_missing(self):
        assert Gates.check_required_fields(license_number=None) is False
