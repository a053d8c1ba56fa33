"""Tests for weekly eligibility."""

from datetime import date, timedelta

import pytest
from django.test import override_settings
from django.utils import timezone

from visitman.exceptions import DuplicateVisit, MemberNotFound, ShopNotFound
from visitman.services import EligibilityService, VisitService
from visitman.tests.conftest import NEXT_SUNDAY, WEEK_SATURDAY, WEEK_SUNDAY, at


pytestmark = pytest.mark.django_db

MONDAY = WEEK_SUNDAY + timedelta(days=1)


def visit_days(store, customer, shop, days, hour=12):
    for day in days:
        store.append_visit(shop, customer, at(day, hour))


class TestUniqueVisitDays:
    """Tests for unique_visit_days."""

    def test_no_visits(self, customer, shop):
        assert EligibilityService().unique_visit_days(customer, shop, WEEK_SUNDAY) == set()

    def test_counts_days_in_week(self, store, customer, shop):
        visit_days(store, customer, shop, [MONDAY, MONDAY + timedelta(days=2)])

        days = EligibilityService().unique_visit_days(customer, shop, at(WEEK_SUNDAY, 0))
        assert days == {MONDAY, MONDAY + timedelta(days=2)}

    def test_accepts_codes(self, store, customer, shop):
        visit_days(store, customer, shop, [MONDAY])
        assert EligibilityService().unique_visit_days("u_customer", "shop_sunny", WEEK_SUNDAY) == {MONDAY}

    def test_window_start_inclusive_end_exclusive(self, store, customer, shop):
        store.append_visit(shop, customer, at(WEEK_SUNDAY, 0, 0))
        store.append_visit(shop, customer, at(NEXT_SUNDAY, 0, 0))

        service = EligibilityService()
        assert service.unique_visit_days(customer, shop, WEEK_SUNDAY) == {WEEK_SUNDAY}
        assert service.unique_visit_days(customer, shop, NEXT_SUNDAY) == {NEXT_SUNDAY}

    def test_stored_day_decides_week_after_time_zone_change(self, store, customer, shop):
        """Saturday 23:30 in Sao Paulo is already Sunday in UTC; the stored day wins."""
        store.append_visit(shop, customer, at(WEEK_SATURDAY, 23, 30))

        service = EligibilityService()
        with timezone.override("UTC"):
            assert service.unique_visit_days(customer, shop, NEXT_SUNDAY) == set()
            assert service.unique_visit_days(customer, shop, WEEK_SUNDAY) == {WEEK_SATURDAY}

    def test_other_shop_and_customer_ignored(self, store, customer, customer_b, shop, hotel):
        visit_days(store, customer, hotel, [MONDAY])
        visit_days(store, customer_b, shop, [MONDAY])

        assert EligibilityService().unique_visit_days(customer, shop, WEEK_SUNDAY) == set()

    def test_unknown_shop(self, customer):
        with pytest.raises(ShopNotFound):
            EligibilityService().unique_visit_days(customer, "shop_nope", WEEK_SUNDAY)

    def test_unknown_customer(self, shop):
        with pytest.raises(MemberNotFound):
            EligibilityService().unique_visit_days("u_nope", shop, WEEK_SUNDAY)


class TestIsEligible:
    """Tests for is_eligible and weekly_progress."""

    def test_five_days_not_eligible(self, store, customer, shop):
        visit_days(store, customer, shop, [MONDAY + timedelta(days=i) for i in range(5)])
        assert EligibilityService().is_eligible(customer, shop, now=at(WEEK_SATURDAY, 20)) is False

    def test_six_days_eligible(self, store, customer, shop):
        visit_days(store, customer, shop, [MONDAY + timedelta(days=i) for i in range(6)])
        assert EligibilityService().is_eligible(customer, shop, now=at(WEEK_SATURDAY, 20)) is True

    def test_all_seven_days_eligible(self, store, customer, shop):
        visit_days(store, customer, shop, [WEEK_SUNDAY + timedelta(days=i) for i in range(7)])
        assert EligibilityService().is_eligible(customer, shop, now=at(WEEK_SATURDAY, 20)) is True

    def test_monotonic_within_week(self, store, customer, shop):
        service = EligibilityService()
        seen_eligible = False
        for i in range(7):
            store.append_visit(shop, customer, at(WEEK_SUNDAY + timedelta(days=i)))
            eligible = service.is_eligible(customer, shop, now=at(WEEK_SATURDAY, 22))
            assert not (seen_eligible and not eligible)
            seen_eligible = seen_eligible or eligible
        assert seen_eligible

    def test_no_carry_over(self, store, customer, shop):
        visit_days(store, customer, shop, [MONDAY + timedelta(days=i) for i in range(6)])
        assert EligibilityService().is_eligible(customer, shop, now=at(NEXT_SUNDAY, 0, 1)) is False

    def test_progress(self, store, customer, shop):
        visit_days(store, customer, shop, [MONDAY, MONDAY + timedelta(days=3)])

        progress = EligibilityService().weekly_progress(customer, shop, now=at(WEEK_SATURDAY))
        assert progress.week_start == at(WEEK_SUNDAY, 0)
        assert progress.days == (MONDAY, MONDAY + timedelta(days=3))
        assert progress.count == 2
        assert progress.remaining == 4
        assert progress.is_eligible is False

    def test_progress_for_explicit_week(self, store, customer, shop):
        visit_days(store, customer, shop, [NEXT_SUNDAY])

        progress = EligibilityService().weekly_progress(
            customer, shop, week_start=NEXT_SUNDAY, now=at(WEEK_SATURDAY)
        )
        assert progress.days == (NEXT_SUNDAY,)

    @override_settings(VISITMAN={"REWARD_THRESHOLD_DAYS": 3})
    def test_threshold_configurable(self, store, customer, shop):
        visit_days(store, customer, shop, [MONDAY + timedelta(days=i) for i in range(3)])
        assert EligibilityService().is_eligible(customer, shop, now=at(WEEK_SATURDAY)) is True


class TestEligibleCustomers:
    def test_lists_only_eligible(self, store, customer, customer_b, shop):
        visit_days(store, customer, shop, [MONDAY + timedelta(days=i) for i in range(6)])
        visit_days(store, customer_b, shop, [MONDAY, MONDAY + timedelta(days=1)])

        eligible = EligibilityService().eligible_customers(shop, now=at(WEEK_SATURDAY, 20))
        assert eligible == [customer]


class TestWeeklyRewardFlow:
    """Mon..Sat check-ins at Sunny's Pizza, then the next Sunday."""

    def test_full_week(self, customer, shop):
        visits = VisitService()
        eligibility = EligibilityService()
        saturday_evening = at(WEEK_SATURDAY, 18)

        for i in range(6):
            day = MONDAY + timedelta(days=i)
            visits.direct_check_in(
                customer,
                "shop_sunny",
                "4521",
                transaction_ref=f"T-{i}",
                visit_date=day.isoformat(),
                now=saturday_evening,
            )

        assert eligibility.weekly_progress(customer, shop, now=saturday_evening).count == 6
        assert eligibility.is_eligible(customer, shop, now=saturday_evening) is True

        with pytest.raises(DuplicateVisit):
            visits.direct_check_in(customer, "shop_sunny", "4521", now=saturday_evening)
        assert eligibility.weekly_progress(customer, shop, now=saturday_evening).count == 6

        sunday = at(NEXT_SUNDAY, 10)
        visits.direct_check_in(customer, "shop_sunny", "4521", now=sunday)

        progress = eligibility.weekly_progress(customer, shop, now=sunday)
        assert progress.days == (date(2026, 10, 18),)
        assert eligibility.is_eligible(customer, shop, now=sunday) is False
