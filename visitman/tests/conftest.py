"""Pytest fixtures for Visitman tests.

Dates are pinned to the week of Sunday 2026-10-11 .. Saturday 2026-10-17
(America/Sao_Paulo, see tests/settings.py) and passed as `now=` so nothing
depends on the real clock.
"""

from datetime import date, datetime

import pytest
from django.utils import timezone

from visitman.apps import get_store
from visitman.models import Member, Role, Shop, ShopCategory

WEEK_SUNDAY = date(2026, 10, 11)
WEEK_SATURDAY = date(2026, 10, 17)
NEXT_SUNDAY = date(2026, 10, 18)


def at(day: date, hour: int = 12, minute: int = 0) -> datetime:
    """Aware local datetime on `day`."""
    return timezone.make_aware(datetime(day.year, day.month, day.day, hour, minute))


@pytest.fixture
def store(db):
    return get_store()


@pytest.fixture
def customer(db):
    """Create a test customer."""
    return Member.objects.create(
        code="u_customer",
        name="Ana Costa",
        email="ana@example.com",
        role=Role.CUSTOMER,
    )


@pytest.fixture
def customer_b(db):
    return Member.objects.create(
        code="u_customer_b",
        name="Bruno Lima",
        email="bruno@example.com",
        role=Role.CUSTOMER,
    )


@pytest.fixture
def owner(db):
    """Create a shop owner."""
    return Member.objects.create(
        code="u_owner",
        name="Sunny Rossi",
        email="sunny@example.com",
        role=Role.OWNER,
    )


@pytest.fixture
def owner_b(db):
    return Member.objects.create(
        code="u_owner_b",
        name="Carla Dias",
        email="carla@example.com",
        role=Role.OWNER,
    )


@pytest.fixture
def admin_member(db):
    """Create an admin member."""
    return Member.objects.create(
        code="u_admin",
        name="Admin",
        email="admin@example.com",
        role=Role.ADMIN,
    )


@pytest.fixture
def shop(owner):
    """Sunny's Pizza, secret code 4521."""
    return Shop.objects.create(
        code="shop_sunny",
        name="Sunny's Pizza",
        category=ShopCategory.FAST_FOOD,
        owner=owner,
        owner_email="pizza@example.com",
        secret_code="4521",
    )


@pytest.fixture
def hotel(owner):
    return Shop.objects.create(
        code="shop_hotel",
        name="Harbor Hotel",
        category=ShopCategory.HOTEL,
        owner=owner,
        owner_email="hotel@example.com",
        secret_code="Blue7",
    )
