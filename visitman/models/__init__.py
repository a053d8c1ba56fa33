"""Visitman models."""

from visitman.models.member import Member, Role
from visitman.models.shop import Shop, ShopCategory, VerificationStatus
from visitman.models.visit import Visit

__all__ = [
    "Member",
    "Role",
    "Shop",
    "ShopCategory",
    "VerificationStatus",
    "Visit",
]
