# wallets/tests/test_api.py

from __future__ import annotations

from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from wallets.services import ledger

User = get_user_model()


@override_settings(WALLET_CREDIT_PACKAGES=[1000, 2500, 5000, 10000])
class WalletApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.customer = User.objects.create_user(
            email="customer@example.com",
            password="pass",
            role="customer",
        )
        self.advisor = User.objects.create_user(
            email="advisor@example.com",
            password="pass",
            role="advisor",
        )
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass",
            role="admin",
        )

    def test_anonymous_is_rejected(self):
        res = self.client.get(reverse("wallets:summary"))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_summary_auto_creates_empty_wallet(self):
        self.client.force_authenticate(self.customer)

        res = self.client.get(reverse("wallets:summary"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["wallet"]["balance_cents"], 0)
        self.assertEqual(res.data["wallet"]["customer_id"], "customer@example.com")
        self.assertEqual(res.data["transactions"], [])

    def test_add_credits_with_package(self):
        self.client.force_authenticate(self.customer)

        res = self.client.post(reverse("wallets:add-credits"), {"amount_cents": 5000}, format="json")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["wallet"]["balance_cents"], 5000)
        self.assertEqual(res.data["transaction"]["type"], "credit")

    def test_add_credits_rejects_unknown_package(self):
        self.client.force_authenticate(self.customer)

        res = self.client.post(reverse("wallets:add-credits"), {"amount_cents": 1234}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")

    def test_advisor_cannot_top_up(self):
        self.client.force_authenticate(self.advisor)

        res = self.client.post(reverse("wallets:add-credits"), {"amount_cents": 1000}, format="json")

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_staff_have_no_wallet_and_cannot_inspect_others(self):
        self.client.force_authenticate(self.advisor)

        self.assertEqual(self.client.get(reverse("wallets:summary")).status_code, status.HTTP_403_FORBIDDEN)

        res = self.client.get(reverse("wallets:admin-detail", args=["customer@example.com"]))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(res.data["error"]["code"], "PERMISSION_DENIED")

    def test_admin_grant_and_inspect(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            reverse("wallets:admin-grant"),
            {"customer_id": "customer@example.com", "amount_cents": 750, "description": "Goodwill"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["wallet"]["balance_cents"], 750)

        res = self.client.get(reverse("wallets:admin-detail", args=["customer@example.com"]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["transactions"][0]["description"], "Goodwill")

    def test_admin_inspect_unknown_wallet_is_404(self):
        self.client.force_authenticate(self.admin)

        res = self.client.get(reverse("wallets:admin-detail", args=["ghost@example.com"]))

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_customer_cannot_grant(self):
        self.client.force_authenticate(self.customer)

        res = self.client.post(
            reverse("wallets:admin-grant"),
            {"customer_id": "customer@example.com", "amount_cents": 750},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(ledger.get_or_create_wallet(customer_id="customer@example.com").balance_cents, 0)

    def test_admin_inspect_storage_failure_is_opaque_500(self):
        self.client.force_authenticate(self.admin)

        with mock.patch(
            "wallets.views.wallet.get_wallet_for_customer",
            side_effect=DatabaseError("disk I/O error"),
        ), self.assertLogs("backend.api_errors", level="ERROR") as logs:
            res = self.client.get(reverse("wallets:admin-detail", args=["customer@example.com"]))

        self.assertEqual(res.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(res.data["error"]["code"], "INTERNAL_ERROR")
        self.assertNotIn("disk I/O error", res.data["error"]["message"])
        self.assertEqual(logs.records[0].operation, "wallet.admin_detail")
