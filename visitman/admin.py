"""Visitman admin."""

from django.contrib import admin, messages
from django.utils.html import format_html

from visitman.exceptions import VisitmanError
from visitman.models import Member, Shop, VerificationStatus, Visit


# ===========================================
# Member Admin
# ===========================================


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "email", "role", "shop_count", "created_at"]
    list_filter = ["role"]
    search_fields = ["code", "name", "email"]
    readonly_fields = ["code", "role", "created_at"]

    def has_delete_permission(self, request, obj=None):
        return False

    def shop_count(self, obj):
        return obj.shops.count()

    shop_count.short_description = "Lojas"


# ===========================================
# Shop Admin
# ===========================================


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "code",
        "category",
        "owner",
        "status_badge",
        "license_number",
        "visit_count",
    ]
    list_filter = ["verification_status", "category"]
    search_fields = ["code", "name", "owner__code", "license_number"]
    raw_id_fields = ["owner"]
    readonly_fields = ["code", "secret_code", "verification_status", "created_at"]
    actions = ["approve_verification", "reject_verification"]

    def status_badge(self, obj):
        colors = {
            "verified": "#198754",
            "pending": "#fd7e14",
            "unverified": "#6c757d",
        }
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            colors.get(obj.verification_status, "#6c757d"),
            obj.get_verification_status_display(),
        )

    status_badge.short_description = "Verificação"

    def visit_count(self, obj):
        return obj.visits.count()

    visit_count.short_description = "Visitas"

    @admin.action(description="Aprovar verificação")
    def approve_verification(self, request, queryset):
        self._review(request, queryset, VerificationStatus.VERIFIED)

    @admin.action(description="Rejeitar / revogar verificação")
    def reject_verification(self, request, queryset):
        self._review(request, queryset, VerificationStatus.UNVERIFIED)

    def _review(self, request, queryset, target):
        from visitman.services import ShopService

        service = ShopService()
        done = 0
        for shop in queryset:
            try:
                service.review(shop, target, reviewer=request.user.get_username())
                done += 1
            except VisitmanError as exc:
                self.message_user(request, f"{shop.name}: {exc.message}", messages.WARNING)
        if done:
            self.message_user(request, f"{done} loja(s) atualizada(s).", messages.SUCCESS)


# ===========================================
# Visit Admin (append-only)
# ===========================================


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ["timestamp", "day", "customer", "shop", "transaction_ref"]
    list_filter = ["shop"]
    search_fields = ["code", "customer__code", "shop__code", "transaction_ref"]
    readonly_fields = ["code", "shop", "customer", "timestamp", "day", "transaction_ref", "created_at"]
    date_hierarchy = "timestamp"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
