"""
Eligibility calculator — weekly unique visit days and reward flags.

Pure reads over the RecordStore: nothing here writes.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime

from visitman.conf import visitman_settings
from visitman.days import week_start as current_week_start
from visitman.days import week_day_range, week_window
from visitman.models import Member, Shop
from visitman.services.base import StoreService


@dataclass(frozen=True)
class WeeklyProgress:
    """A customer's standing at one shop for one week."""

    week_start: datetime
    days: tuple[date, ...]
    threshold: int

    @property
    def count(self) -> int:
        return len(self.days)

    @property
    def remaining(self) -> int:
        return max(0, self.threshold - self.count)

    @property
    def is_eligible(self) -> bool:
        return self.count >= self.threshold


class EligibilityService(StoreService):
    """
    Weekly eligibility over the visit records.

    A week is the seven calendar days from week_start, matched against each
    visit's stored day (frozen when the visit was recorded).
    Eligibility always looks at the week containing `now`: there is no
    carry-over and no redemption ledger.
    """

    def unique_visit_days(
        self,
        customer: Member | str,
        shop: Shop | str,
        week_start: date | datetime,
    ) -> set[date]:
        """
        Distinct calendar days with a visit by customer at shop in the week.

        Args:
            customer: Member or member code
            shop: Shop or shop code
            week_start: Any instant or date of the opening day; normalized
                to local midnight

        Returns:
            Set of calendar days (empty if no visits)
        """
        first, end = week_day_range(week_start)
        visits = self.store.visits(
            customer=self._member(customer),
            shop=self._shop(shop),
            first_day=first,
            end_day=end,
        )
        return {visit.day for visit in visits}

    def weekly_progress(
        self,
        customer: Member | str,
        shop: Shop | str,
        week_start: date | datetime | None = None,
        now: datetime | None = None,
    ) -> WeeklyProgress:
        """Progress for the given week (default: the week containing `now`)."""
        start = week_window(week_start)[0] if week_start is not None else current_week_start(now)
        days = self.unique_visit_days(customer, shop, start)
        return WeeklyProgress(
            week_start=start,
            days=tuple(sorted(days)),
            threshold=visitman_settings.REWARD_THRESHOLD_DAYS,
        )

    def is_eligible(
        self,
        customer: Member | str,
        shop: Shop | str,
        now: datetime | None = None,
    ) -> bool:
        """True iff the current week has at least REWARD_THRESHOLD_DAYS visit days."""
        days = self.unique_visit_days(customer, shop, current_week_start(now))
        return len(days) >= visitman_settings.REWARD_THRESHOLD_DAYS

    def eligible_customers(
        self,
        shop: Shop | str,
        now: datetime | None = None,
    ) -> list[Member]:
        """Customers eligible at shop this week, ordered by member code."""
        first, end = week_day_range(current_week_start(now))
        days_by_customer: dict[Member, set[date]] = defaultdict(set)
        for visit in self.store.visits(shop=self._shop(shop), first_day=first, end_day=end):
            days_by_customer[visit.customer].add(visit.day)

        threshold = visitman_settings.REWARD_THRESHOLD_DAYS
        return sorted(
            (member for member, days in days_by_customer.items() if len(days) >= threshold),
            key=lambda member: member.code,
        )
