"""
Role dashboards — the data each primary view shows.

customer: weekly calendar per shop (any week via offset) + visit history
owner:    own shops with scan counts and eligible-customer counts
admin:    review queue (pending + verified) + every shop's card
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from visitman.days import shift_weeks, today, week_days, week_start
from visitman.models import Member, Shop, Visit
from visitman.services.eligibility import EligibilityService, WeeklyProgress
from visitman.services.shops import ShopService
from visitman.services.visits import VisitService


@dataclass(frozen=True)
class DayCell:
    day: date
    visited: bool
    is_today: bool


@dataclass(frozen=True)
class CustomerShopCard:
    shop: Shop
    progress: WeeklyProgress
    calendar: tuple[DayCell, ...]
    last_visit: Visit | None = None

    @property
    def is_eligible(self) -> bool:
        return self.progress.is_eligible


@dataclass(frozen=True)
class CustomerDashboard:
    member: Member
    week_start: date
    week_end: date
    cards: tuple[CustomerShopCard, ...]
    history: tuple[Visit, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OwnerShopCard:
    shop: Shop
    scan_count: int
    eligible_count: int


@dataclass(frozen=True)
class OwnerDashboard:
    member: Member
    cards: tuple[OwnerShopCard, ...]
    category_counts: dict[str, int]
    unverified: tuple[Shop, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AdminDashboard:
    member: Member
    review_queue: tuple[Shop, ...]
    cards: tuple[OwnerShopCard, ...]


def customer_dashboard(
    store,
    member: Member,
    now: datetime | None = None,
    week_offset: int = 0,
    history_limit: int = 20,
) -> CustomerDashboard:
    """Calendar for the week `week_offset` weeks from the current one."""
    eligibility = EligibilityService(store)
    visits = VisitService(store)

    start = shift_weeks(week_start(now), week_offset)
    dates = week_days(start)
    current_day = today(now)

    cards = []
    for shop in ShopService(store).search():
        progress = eligibility.weekly_progress(member, shop, week_start=start)
        visited = set(progress.days)
        cards.append(
            CustomerShopCard(
                shop=shop,
                progress=progress,
                calendar=tuple(
                    DayCell(day=d, visited=d in visited, is_today=d == current_day)
                    for d in dates
                ),
                last_visit=visits.last_visit(member, shop),
            )
        )

    return CustomerDashboard(
        member=member,
        week_start=dates[0],
        week_end=dates[-1],
        cards=tuple(cards),
        history=tuple(visits.history(member, limit=history_limit)),
    )


def _shop_cards(store, shops: list[Shop], now: datetime | None) -> tuple[OwnerShopCard, ...]:
    eligibility = EligibilityService(store)
    visits = VisitService(store)
    return tuple(
        OwnerShopCard(
            shop=shop,
            scan_count=visits.scan_count(shop),
            eligible_count=len(eligibility.eligible_customers(shop, now=now)),
        )
        for shop in shops
    )


def owner_dashboard(
    store,
    member: Member,
    now: datetime | None = None,
    category: str | None = None,
    query: str = "",
    sort: str = "name",
) -> OwnerDashboard:
    shops = ShopService(store)
    return OwnerDashboard(
        member=member,
        cards=_shop_cards(
            store,
            shops.search(owner=member, category=category, query=query, sort=sort),
            now,
        ),
        category_counts=shops.category_counts(owner=member),
        unverified=tuple(shops.unverified_for(member)),
    )


def admin_dashboard(store, member: Member, now: datetime | None = None) -> AdminDashboard:
    shops = ShopService(store)
    return AdminDashboard(
        member=member,
        review_queue=tuple(shops.review_queue()),
        cards=_shop_cards(store, shops.search(), now),
    )
