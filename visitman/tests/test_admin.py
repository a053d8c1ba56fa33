"""Tests for the Shop admin review actions."""

from unittest.mock import MagicMock, patch

import pytest
from django.contrib import messages
from django.contrib.admin.sites import AdminSite
from django.core import checks

from visitman.admin import ShopAdmin, VisitAdmin
from visitman.models import Shop, VerificationStatus, Visit
from visitman.services import ShopService


pytestmark = pytest.mark.django_db


@pytest.fixture
def shop_admin():
    return ShopAdmin(Shop, AdminSite())


@pytest.fixture
def staff_request():
    request = MagicMock()
    request.user.get_username.return_value = "staff"
    return request


class TestShopAdminActions:
    def test_approve_pending(self, shop_admin, staff_request, owner, shop):
        ShopService().submit_verification(owner, shop, "LIC-1")

        with patch.object(shop_admin, "message_user") as message_user:
            shop_admin.approve_verification(staff_request, Shop.objects.all())

        shop.refresh_from_db()
        assert shop.verification_status == VerificationStatus.VERIFIED
        assert message_user.call_args[0][2] == messages.SUCCESS

    def test_invalid_transition_reported(self, shop_admin, staff_request, shop):
        with patch.object(shop_admin, "message_user") as message_user:
            shop_admin.approve_verification(staff_request, Shop.objects.all())

        shop.refresh_from_db()
        assert shop.verification_status == VerificationStatus.UNVERIFIED
        assert message_user.call_args[0][2] == messages.WARNING

    def test_status_badge(self, shop_admin, shop):
        assert "Não verificada" in shop_admin.status_badge(shop)


class TestVisitAdmin:
    def test_append_only(self, staff_request):
        visit_admin = VisitAdmin(Visit, AdminSite())
        assert visit_admin.has_add_permission(staff_request) is False
        assert visit_admin.has_change_permission(staff_request) is False
        assert visit_admin.has_delete_permission(staff_request) is False


class TestAdminSetup:
    def test_system_checks_report_no_errors(self):
        errors = [message for message in checks.run_checks() if message.is_serious()]
        assert errors == []
