from django.urls import path

from .views import (
    CheckInView,
    DashboardView,
    LoginView,
    LogoutView,
    OwnerCheckInView,
    RegisterView,
    ShopListView,
    ShopReviewView,
    ShopVerificationView,
)

app_name = "visitman"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("shops/", ShopListView.as_view(), name="shops"),
    path("shops/<str:code>/verification/", ShopVerificationView.as_view(), name="shop-verification"),
    path("shops/<str:code>/review/", ShopReviewView.as_view(), name="shop-review"),
    path("shops/<str:code>/check-in/", OwnerCheckInView.as_view(), name="owner-check-in"),
    path("check-in/", CheckInView.as_view(), name="check-in"),
]
