"""
Visitman JSON endpoints.

The active member is kept in request.session through SessionController.
Every VisitmanError becomes {"error": {code, message, data}} with a status
from ERROR_STATUS; the app stays usable after any failure.
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from visitman.exceptions import (
    DuplicateVisit,
    InvalidCode,
    MemberNotFound,
    PermissionDenied,
    ShopNotFound,
    StorageUnavailable,
    ValidationError,
    VisitmanError,
)
from visitman.services import (
    Capability,
    EligibilityService,
    SessionController,
    ShopService,
    VisitService,
)
from visitman.services.dashboards import AdminDashboard, CustomerDashboard, OwnerDashboard

logger = logging.getLogger("visitman.views")

ERROR_STATUS = {
    ShopNotFound: 404,
    MemberNotFound: 404,
    PermissionDenied: 403,
    InvalidCode: 400,
    ValidationError: 400,
    DuplicateVisit: 409,
    StorageUnavailable: 503,
}


# ===========================================
# Serialization
# ===========================================


def member_data(member) -> dict:
    return {"id": member.code, "name": member.name, "email": member.email, "role": member.role}


def shop_data(shop, include_secret: bool = False) -> dict:
    data = {
        "id": shop.code,
        "name": shop.name,
        "type": shop.category,
        "owner_id": shop.owner.code,
        "verification_status": shop.verification_status,
        "license_number": shop.license_number or None,
        "scan_token": shop.scan_token,
    }
    if include_secret:
        data["owner_email"] = shop.owner_email
        data["secret_code"] = shop.secret_code
    return data


def visit_data(visit) -> dict:
    return {
        "id": visit.code,
        "shop_id": visit.shop.code,
        "customer_id": visit.customer.code,
        "timestamp": visit.timestamp.isoformat(),
        "day": visit.day.isoformat(),
        "transaction_id": visit.transaction_ref,
    }


def dashboard_data(dashboard) -> dict:
    if isinstance(dashboard, CustomerDashboard):
        return {
            "role": "customer",
            "member": member_data(dashboard.member),
            "week_start": dashboard.week_start.isoformat(),
            "week_end": dashboard.week_end.isoformat(),
            "shops": [
                {
                    "shop": shop_data(card.shop),
                    "days_visited": card.progress.count,
                    "remaining": card.progress.remaining,
                    "is_eligible": card.is_eligible,
                    "calendar": [
                        {"day": cell.day.isoformat(), "visited": cell.visited, "is_today": cell.is_today}
                        for cell in card.calendar
                    ],
                    "last_visit": visit_data(card.last_visit) if card.last_visit else None,
                }
                for card in dashboard.cards
            ],
            "history": [visit_data(v) for v in dashboard.history],
        }

    cards = [
        {
            "shop": shop_data(card.shop, include_secret=isinstance(dashboard, OwnerDashboard)),
            "scan_count": card.scan_count,
            "eligible_count": card.eligible_count,
        }
        for card in dashboard.cards
    ]
    if isinstance(dashboard, OwnerDashboard):
        return {
            "role": "owner",
            "member": member_data(dashboard.member),
            "shops": cards,
            "category_counts": dashboard.category_counts,
            "unverified": [s.code for s in dashboard.unverified],
        }
    if isinstance(dashboard, AdminDashboard):
        return {
            "role": "admin",
            "member": member_data(dashboard.member),
            "review_queue": [shop_data(s) for s in dashboard.review_queue],
            "shops": cards,
        }
    raise TypeError(f"Unknown dashboard: {type(dashboard).__name__}")


# ===========================================
# Base view
# ===========================================


@method_decorator(csrf_exempt, name="dispatch")
class VisitmanView(View):
    """JSON view with VisitmanError handling and a session controller."""

    def dispatch(self, request, *args, **kwargs):
        self.session = SessionController(request.session)
        try:
            return super().dispatch(request, *args, **kwargs)
        except VisitmanError as exc:
            status = next(
                (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
                400,
            )
            logger.info("%s %s rejected: %s", request.method, request.path, exc.code)
            return JsonResponse({"error": exc.as_dict()}, status=status)

    @staticmethod
    def payload(request) -> dict:
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except (json.JSONDecodeError, ValueError):
            raise ValidationError(message="Invalid JSON")
        if not isinstance(data, dict):
            raise ValidationError(message="JSON body must be an object")
        return data

    @staticmethod
    def field(data: dict, name: str, default: str | None = "") -> str | None:
        """
        Text field from a JSON body.

        Numbers are taken as their text (a PIN typed into a numeric input
        arrives as 4521); objects, lists and booleans are rejected.
        """
        value = data.get(name)
        if value is None:
            return default
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise ValidationError(message=f"{name} must be a string", field=name)


# ===========================================
# Session
# ===========================================


class RegisterView(VisitmanView):
    def post(self, request):
        data = self.payload(request)
        member = self.session.register(
            self.field(data, "name"),
            self.field(data, "email"),
            self.field(data, "role", "customer"),
        )
        return JsonResponse({"member": member_data(member)}, status=201)


class LoginView(VisitmanView):
    def post(self, request):
        member = self.session.login(self.field(self.payload(request), "member_id"))
        return JsonResponse({"member": member_data(member)})


class LogoutView(VisitmanView):
    def post(self, request):
        self.session.logout()
        return JsonResponse({"status": "logged_out"})


class DashboardView(VisitmanView):
    def get(self, request):
        options = {}
        if self.session.can(Capability.VIEW_HISTORY):
            try:
                options["week_offset"] = int(request.GET.get("week_offset", 0))
            except ValueError:
                raise ValidationError(message="week_offset must be an integer")
        elif self.session.can(Capability.MANAGE_SHOPS):
            options["category"] = request.GET.get("type") or None
            options["query"] = request.GET.get("q", "")
            options["sort"] = request.GET.get("sort", "name")
        return JsonResponse(dashboard_data(self.session.dashboard(**options)))


# ===========================================
# Shops
# ===========================================


class ShopListView(VisitmanView):
    def get(self, request):
        member = self.session.current
        owner = member if member is not None and self.session.can(Capability.MANAGE_SHOPS) else None
        shops = ShopService().search(
            owner=owner,
            category=request.GET.get("type") or None,
            query=request.GET.get("q", ""),
            sort=request.GET.get("sort", "name"),
        )
        return JsonResponse({"shops": [shop_data(s, include_secret=owner is not None) for s in shops]})

    def post(self, request):
        owner = self.session.require(Capability.MANAGE_SHOPS)
        data = self.payload(request)
        shop = ShopService().register(
            owner,
            name=self.field(data, "name"),
            owner_email=self.field(data, "owner_email"),
            category=self.field(data, "type", "fast-food"),
            secret_code=self.field(data, "secret_code"),
        )
        return JsonResponse({"shop": shop_data(shop, include_secret=True)}, status=201)


class ShopVerificationView(VisitmanView):
    def post(self, request, code):
        owner = self.session.require(Capability.MANAGE_SHOPS)
        shop = ShopService().submit_verification(
            owner, code, self.field(self.payload(request), "license_number")
        )
        return JsonResponse({"shop": shop_data(shop)})


class ShopReviewView(VisitmanView):
    ACTIONS = {"approve", "reject", "revoke"}

    def post(self, request, code):
        admin = self.session.require(Capability.REVIEW_SHOPS)
        action = self.field(self.payload(request), "action")
        if action not in self.ACTIONS:
            raise ValidationError(message=f"Unknown review action: {action}", allowed=sorted(self.ACTIONS))
        shop = getattr(ShopService(), action)(admin, code)
        return JsonResponse({"shop": shop_data(shop)})


class OwnerCheckInView(VisitmanView):
    def post(self, request, code):
        owner = self.session.require(Capability.MANAGE_SHOPS)
        data = self.payload(request)
        visit = VisitService().owner_check_in(
            owner,
            code,
            self.field(data, "customer_id"),
            transaction_ref=self.field(data, "transaction_id"),
            visit_date=self.field(data, "visit_date", None),
        )
        return JsonResponse({"visit": visit_data(visit)}, status=201)


# ===========================================
# Customers
# ===========================================


class CheckInView(VisitmanView):
    """
    Customer check-in.

    Body: {"shop_id": "<id or loyalty_scan token>", "secret_code": "...",
           "transaction_id": "...", "visit_date": "YYYY-MM-DD"}
    """

    def post(self, request):
        customer = self.session.require(Capability.RECORD_VISIT)
        data = self.payload(request)
        visit = VisitService().direct_check_in(
            customer,
            self.field(data, "shop_id") or self.field(data, "token"),
            self.field(data, "secret_code"),
            transaction_ref=self.field(data, "transaction_id"),
            visit_date=self.field(data, "visit_date", None),
        )
        progress = EligibilityService().weekly_progress(customer, visit.shop)
        return JsonResponse(
            {
                "visit": visit_data(visit),
                "days_visited": progress.count,
                "is_eligible": progress.is_eligible,
            },
            status=201,
        )
