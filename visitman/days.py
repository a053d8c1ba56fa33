"""
Calendar-day arithmetic.

The eligibility calculator and the one-visit-per-day gate both derive day
identifiers here, so they always agree on what "same day" means.

A day identifier is the local date (current Django time zone) an instant
renders to. Weeks open at local midnight of WEEK_START_WEEKDAY (Sunday by
default) and cover seven calendar days, half-open.
"""

from datetime import date, datetime, time, timedelta

from django.utils import timezone

from visitman.conf import visitman_settings

DAYS_PER_WEEK = 7


def local_midnight(day: date) -> datetime:
    """Aware datetime for 00:00 of `day` in the current time zone."""
    return timezone.make_aware(datetime.combine(day, time.min))


def calendar_day(instant: datetime) -> date:
    """Local calendar date of an aware instant."""
    return timezone.localtime(instant).date()


def today(now: datetime | None = None) -> date:
    return calendar_day(now or timezone.now())


def start_of_day(value: date | datetime) -> datetime:
    """Normalize a date or instant to local midnight of its calendar day."""
    if isinstance(value, datetime):
        value = calendar_day(value)
    return local_midnight(value)


def week_start(at: datetime | None = None) -> datetime:
    """Local midnight of the most recent week-start weekday at or before `at`."""
    day = today(at)
    offset = (day.weekday() - visitman_settings.WEEK_START_WEEKDAY) % DAYS_PER_WEEK
    return local_midnight(day - timedelta(days=offset))


def week_window(start: date | datetime) -> tuple[datetime, datetime]:
    """Half-open [start, end) window of the week opening at `start`."""
    begin = start_of_day(start)
    end = local_midnight(calendar_day(begin) + timedelta(days=DAYS_PER_WEEK))
    return begin, end


def week_days(start: date | datetime) -> list[date]:
    """The seven calendar dates of the week opening at `start`."""
    first = calendar_day(start_of_day(start))
    return [first + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def week_day_range(start: date | datetime) -> tuple[date, date]:
    """Half-open [first, end) calendar-day range of the week opening at `start`."""
    first = calendar_day(start_of_day(start))
    return first, first + timedelta(days=DAYS_PER_WEEK)


def shift_weeks(start: datetime, offset: int) -> datetime:
    """Start of the week `offset` weeks away (negative = past)."""
    return local_midnight(calendar_day(start) + timedelta(weeks=offset))


def visit_timestamp(visit_date: date, now: datetime | None = None) -> datetime:
    """
    Combine the caller's chosen calendar date with the current local time of day.

    Keeps ordering among same-day visits while the stored date always
    reflects the caller's choice.
    """
    clock = timezone.localtime(now or timezone.now()).time()
    return timezone.make_aware(datetime.combine(visit_date, clock))
