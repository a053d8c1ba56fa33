"""Member model (registered person: customer, shop owner or admin)."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


def new_member_code() -> str:
    return f"u_{uuid.uuid4().hex[:12]}"


class Role(models.TextChoices):
    CUSTOMER = "customer", _("Cliente")
    OWNER = "owner", _("Dono de loja")
    ADMIN = "admin", _("Administrador")


class Member(models.Model):
    """
    Registered member.

    Role is fixed at registration. Members are never deleted.
    """

    code = models.CharField(
        _("código"),
        max_length=50,
        unique=True,
        default=new_member_code,
        help_text=_("Identificador do membro (ex: u_1a2b3c)"),
    )
    name = models.CharField(_("nome"), max_length=200)
    email = models.EmailField(_("email"), db_index=True)
    role = models.CharField(
        _("papel"),
        max_length=20,
        choices=Role.choices,
        default=Role.CUSTOMER,
    )

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)

    class Meta:
        verbose_name = _("membro")
        verbose_name_plural = _("membros")
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.name} ({self.code})"

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""
