# wallets/urls.py

from django.urls import path

from .views import (
    AddCreditsView,
    AdminGrantCreditsView,
    AdminWalletDetailView,
    WalletSummaryView,
)

app_name = "wallets"

urlpatterns = [
    # ---------------- CUSTOMER ----------------
    path("", WalletSummaryView.as_view(), name="summary"),
    path("add-credits/", AddCreditsView.as_view(), name="add-credits"),
    # ---------------- ADMIN ----------------
    path("admin/grant/", AdminGrantCreditsView.as_view(), name="admin-grant"),
    path("admin/<str:customer_id>/", AdminWalletDetailView.as_view(), name="admin-detail"),
]
