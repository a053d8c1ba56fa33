"""
Registration notice for new shops.

Fire-and-forget: a failed e-mail is logged and never reaches the caller.
"""

import logging

from django.core.mail import send_mail
from django.dispatch import receiver

from visitman.conf import visitman_settings
from visitman.signals import shop_registered

logger = logging.getLogger(__name__)


def registration_message(shop) -> tuple[str, str]:
    subject = f"{shop.name} is registered for weekly rewards"
    body = (
        f"Hello,\n\n"
        f"Your shop \"{shop.name}\" is ready to record customer visits.\n\n"
        f"Shop ID (manual entry): {shop.code}\n"
        f"Secret code: {shop.secret_code}\n"
        f"QR code text: {shop.scan_token}\n\n"
        f"Customers who visit on {visitman_settings.REWARD_THRESHOLD_DAYS} different days "
        f"in the same week earn a reward.\n"
    )
    return subject, body


@receiver(shop_registered, dispatch_uid="visitman_notify_shop_registered")
def notify_shop_registered(sender, shop, **kwargs):
    if not visitman_settings.NOTIFY_SHOP_REGISTRATION or not shop.owner_email:
        return

    subject, body = registration_message(shop)
    try:
        send_mail(
            subject,
            body,
            visitman_settings.NOTIFICATION_FROM_EMAIL or None,
            [shop.owner_email],
        )
    except Exception:
        logger.exception("Registration e-mail for shop %s failed", shop.code)
