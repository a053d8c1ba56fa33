"""
Visit model — evidence that a customer attended a shop on a calendar day.

Append-only: visits are never modified or deleted.
"""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


def new_visit_code() -> str:
    return f"scan_{uuid.uuid4().hex[:12]}"


class Visit(models.Model):
    """
    Single recorded visit.

    `day` is the local calendar day of `timestamp`, derived once through
    visitman.days.calendar_day when the visit is appended. Freezing it keeps
    the (customer, shop, day) constraint stable if the time zone changes later.
    """

    code = models.CharField(
        _("código"),
        max_length=50,
        unique=True,
        default=new_visit_code,
    )
    shop = models.ForeignKey(
        "visitman.Shop",
        on_delete=models.PROTECT,
        related_name="visits",
        verbose_name=_("loja"),
    )
    customer = models.ForeignKey(
        "visitman.Member",
        on_delete=models.PROTECT,
        related_name="visits",
        verbose_name=_("cliente"),
    )

    timestamp = models.DateTimeField(_("momento"), db_index=True)
    day = models.DateField(_("dia"), editable=False)

    transaction_ref = models.CharField(
        _("referência da transação"),
        max_length=200,
        blank=True,
        help_text=_("Texto livre (ex: número do cupom)"),
    )

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)

    class Meta:
        verbose_name = _("visita")
        verbose_name_plural = _("visitas")
        ordering = ["-timestamp"]
        constraints = [
            models.UniqueConstraint(
                fields=["customer", "shop", "day"],
                name="visitman_one_visit_per_day",
            ),
        ]
        indexes = [
            models.Index(
                fields=["customer", "shop", "timestamp"],
                name="visitman_visit_cust_shop_ts",
            ),
        ]

    def __str__(self):
        return f"{self.customer.code} @ {self.shop.code} — {self.day.isoformat()}"

    def save(self, *args, **kwargs):
        if not self.day and self.timestamp:
            from visitman.days import calendar_day

            self.day = calendar_day(self.timestamp)
        super().save(*args, **kwargs)
