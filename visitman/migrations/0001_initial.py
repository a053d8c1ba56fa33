# Initial Visitman schema: Member, Shop, Visit

import django.db.models.deletion
from django.db import migrations, models

import visitman.models.member
import visitman.models.shop
import visitman.models.visit


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Member",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        default=visitman.models.member.new_member_code,
                        help_text="Identificador do membro (ex: u_1a2b3c)",
                        max_length=50,
                        unique=True,
                        verbose_name="código",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                (
                    "email",
                    models.EmailField(db_index=True, max_length=254, verbose_name="email"),
                ),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("customer", "Cliente"),
                            ("owner", "Dono de loja"),
                            ("admin", "Administrador"),
                        ],
                        default="customer",
                        max_length=20,
                        verbose_name="papel",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="criado em"),
                ),
            ],
            options={
                "verbose_name": "membro",
                "verbose_name_plural": "membros",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="Shop",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        default=visitman.models.shop.new_shop_code,
                        help_text="ID da loja usado no QR code e na entrada manual",
                        max_length=50,
                        unique=True,
                        verbose_name="código",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("fast-food", "Fast food"),
                            ("hotel", "Hotel"),
                            ("retail", "Varejo"),
                        ],
                        db_index=True,
                        default="fast-food",
                        max_length=20,
                        verbose_name="categoria",
                    ),
                ),
                (
                    "owner_email",
                    models.EmailField(
                        blank=True,
                        help_text="Recebe a confirmação de cadastro",
                        max_length=254,
                        verbose_name="email de contato",
                    ),
                ),
                (
                    "verification_status",
                    models.CharField(
                        choices=[
                            ("unverified", "Não verificada"),
                            ("pending", "Em análise"),
                            ("verified", "Verificada"),
                        ],
                        db_index=True,
                        default="unverified",
                        max_length=20,
                        verbose_name="verificação",
                    ),
                ),
                (
                    "license_number",
                    models.CharField(blank=True, max_length=100, verbose_name="licença"),
                ),
                (
                    "secret_code",
                    models.CharField(
                        editable=False,
                        help_text="Código informado no balcão para confirmar a visita",
                        max_length=50,
                        verbose_name="código secreto",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, db_index=True, verbose_name="criado em"
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="shops",
                        to="visitman.member",
                        verbose_name="dono",
                    ),
                ),
            ],
            options={
                "verbose_name": "loja",
                "verbose_name_plural": "lojas",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Visit",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        default=visitman.models.visit.new_visit_code,
                        max_length=50,
                        unique=True,
                        verbose_name="código",
                    ),
                ),
                (
                    "timestamp",
                    models.DateTimeField(db_index=True, verbose_name="momento"),
                ),
                ("day", models.DateField(editable=False, verbose_name="dia")),
                (
                    "transaction_ref",
                    models.CharField(
                        blank=True,
                        help_text="Texto livre (ex: número do cupom)",
                        max_length=200,
                        verbose_name="referência da transação",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="criado em"),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="visits",
                        to="visitman.member",
                        verbose_name="cliente",
                    ),
                ),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="visits",
                        to="visitman.shop",
                        verbose_name="loja",
                    ),
                ),
            ],
            options={
                "verbose_name": "visita",
                "verbose_name_plural": "visitas",
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(
                        fields=["customer", "shop", "timestamp"],
                        name="visitman_visit_cust_shop_ts",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("customer", "shop", "day"),
                        name="visitman_one_visit_per_day",
                    )
                ],
            },
        ),
    ]
