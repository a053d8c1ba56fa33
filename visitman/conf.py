"""
Visitman configuration.

Usage in settings.py:
    VISITMAN = {
        "REWARD_THRESHOLD_DAYS": 6,
        "REJECT_FUTURE_VISITS": True,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class VisitmanSettings:
    """Visitman configuration settings."""

    # Distinct visit days per week needed for the reward
    REWARD_THRESHOLD_DAYS: int = 6

    # Python weekday that opens an eligibility week (6 = Sunday)
    WEEK_START_WEEKDAY: int = 6

    # Hard-reject visit dates after today
    REJECT_FUTURE_VISITS: bool = False

    # Generated secret codes
    SECRET_CODE_DIGITS: int = 4

    # Scan tokens: "<prefix>:<shop code>"
    SCAN_TOKEN_PREFIX: str = "loyalty_scan"

    # Shop registration e-mail
    NOTIFY_SHOP_REGISTRATION: bool = True
    NOTIFICATION_FROM_EMAIL: str = ""


def get_visitman_settings() -> VisitmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "VISITMAN", {})
    return VisitmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_visitman_settings(), name)


visitman_settings = _LazySettings()
