"""Shop model."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


def new_shop_code() -> str:
    return f"shop_{uuid.uuid4().hex[:12]}"


class ShopCategory(models.TextChoices):
    FAST_FOOD = "fast-food", _("Fast food")
    HOTEL = "hotel", _("Hotel")
    RETAIL = "retail", _("Varejo")


class VerificationStatus(models.TextChoices):
    UNVERIFIED = "unverified", _("Não verificada")
    PENDING = "pending", _("Em análise")
    VERIFIED = "verified", _("Verificada")


class Shop(models.Model):
    """
    Registered shop.

    Customers confirm presence with the shop's secret code, which is fixed
    at creation. verification_status is a trust badge only: it does not
    gate visit recording. Transitions live in services.shops.
    """

    code = models.CharField(
        _("código"),
        max_length=50,
        unique=True,
        default=new_shop_code,
        help_text=_("ID da loja usado no QR code e na entrada manual"),
    )
    name = models.CharField(_("nome"), max_length=200)
    category = models.CharField(
        _("categoria"),
        max_length=20,
        choices=ShopCategory.choices,
        default=ShopCategory.FAST_FOOD,
        db_index=True,
    )

    owner = models.ForeignKey(
        "visitman.Member",
        on_delete=models.PROTECT,
        related_name="shops",
        verbose_name=_("dono"),
    )
    owner_email = models.EmailField(
        _("email de contato"),
        blank=True,
        help_text=_("Recebe a confirmação de cadastro"),
    )

    verification_status = models.CharField(
        _("verificação"),
        max_length=20,
        choices=VerificationStatus.choices,
        default=VerificationStatus.UNVERIFIED,
        db_index=True,
    )
    license_number = models.CharField(_("licença"), max_length=100, blank=True)

    secret_code = models.CharField(
        _("código secreto"),
        max_length=50,
        editable=False,
        help_text=_("Código informado no balcão para confirmar a visita"),
    )

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("loja")
        verbose_name_plural = _("lojas")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.code})"

    @property
    def is_verified(self) -> bool:
        return self.verification_status == VerificationStatus.VERIFIED

    @property
    def scan_token(self) -> str:
        """Text encoded in the shop's QR code."""
        from visitman.scan import scan_token

        return scan_token(self.code)
