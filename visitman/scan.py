"""
Scan-input protocol.

A shop's QR code encodes "<prefix>:<shop code>" (default prefix
"loyalty_scan"). Rendering and camera decoding happen outside Visitman;
only the token text is handled here.
"""

from visitman.conf import visitman_settings
from visitman.exceptions import ValidationError


def scan_token(shop_code: str) -> str:
    """Token text for a shop's QR code."""
    return f"{visitman_settings.SCAN_TOKEN_PREFIX}:{shop_code}"


def is_scan_token(text: str) -> bool:
    return bool(text) and text.startswith(f"{visitman_settings.SCAN_TOKEN_PREFIX}:")


def parse_scan_token(text: str) -> str:
    """
    Extract the shop code from a scanned token.

    Splits on ":" and keeps the second segment; further segments are discarded.

    Raises:
        ValidationError: INVALID_SCAN_TOKEN if the prefix is missing or the
            shop segment is empty.
    """
    text = (text or "").strip()
    if not is_scan_token(text):
        raise ValidationError("INVALID_SCAN_TOKEN", token=text)

    shop_code = text.split(":")[1].strip()
    if not shop_code:
        raise ValidationError("INVALID_SCAN_TOKEN", token=text)
    return shop_code

