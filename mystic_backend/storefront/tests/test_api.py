# storefront/tests/test_api.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from storefront.models import FaqItem, Order, Service, Testimonial

User = get_user_model()


class StorefrontApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.admin = User.objects.create_user(email="admin@example.com", password="pass", role="admin")
        self.advisor = User.objects.create_user(email="advisor@example.com", password="pass", role="advisor")

        self.service = Service.objects.create(
            slug="psychic-reading",
            title="Psychic Reading",
            short_desc="Short",
            long_desc="Long",
            price_cents=2999,
            delivery_hours=24,
            includes=["Written reading"],
        )
        Service.objects.create(
            slug="retired",
            title="Retired",
            short_desc="Short",
            long_desc="Long",
            price_cents=100,
            delivery_hours=24,
            active=False,
        )

        Testimonial.objects.create(name="Sarah M.", text="Accurate!", rating=5)
        Testimonial.objects.create(name="Hidden", text="Hidden", rating=4, active=False)

        FaqItem.objects.create(question="Second?", answer="B", sort_order=2)
        FaqItem.objects.create(question="First?", answer="A", sort_order=1)
        FaqItem.objects.create(question="Hidden?", answer="C", sort_order=0, active=False)

    # =====================================================
    # PUBLIC
    # =====================================================

    def test_public_catalog_shows_active_only(self):
        res = self.client.get(reverse("storefront:service-list"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([s["slug"] for s in res.data], ["psychic-reading"])

        res = self.client.get(reverse("storefront:service-detail", args=["psychic-reading"]))
        self.assertEqual(res.data["includes"], ["Written reading"])

        res = self.client.get(reverse("storefront:service-detail", args=["retired"]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_public_content(self):
        testimonials = self.client.get(reverse("storefront:testimonials"))
        self.assertEqual([t["name"] for t in testimonials.data], ["Sarah M."])

        faq = self.client.get(reverse("storefront:faq"))
        self.assertEqual([f["question"] for f in faq.data], ["First?", "Second?"])

    def test_guest_checkout_and_intake(self):
        res = self.client.post(
            reverse("storefront:order-list"),
            {"email": "guest@example.com", "service_id": self.service.pk},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["payment_status"], "paid")
        self.assertEqual(res.data["payment_provider"], "stripe")
        self.assertEqual(res.data["amount_cents"], 2999)
        self.assertEqual(res.data["status"], "pending")
        self.assertEqual(res.data["status_label"], "Pending")
        self.assertFalse(res.data["has_intake"])
        order_id = res.data["id"]

        intake_url = reverse("storefront:order-intake", args=[order_id])
        res = self.client.post(
            intake_url,
            {"full_name": "Guest Person", "question": "What does my career look like?"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        res = self.client.post(
            intake_url,
            {"full_name": "Guest Person", "question": "What does my career look like?"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "INTAKE_ALREADY_SUBMITTED")

        res = self.client.get(reverse("storefront:order-detail", args=[order_id]))
        self.assertTrue(res.data["has_intake"])

    def test_checkout_errors(self):
        res = self.client.post(
            reverse("storefront:order-list"),
            {"email": "not-an-email", "service_id": self.service.pk},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.post(
            reverse("storefront:order-list"),
            {"email": "guest@example.com", "service_id": 99999},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

        res = self.client.post(
            reverse("storefront:order-intake", args=[99999]),
            {"full_name": "Guest Person", "question": "What does my career look like?"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    # =====================================================
    # ADMIN
    # =====================================================

    def test_admin_endpoints_require_capabilities(self):
        res = self.client.get(reverse("storefront:admin-order-list"))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

        self.client.force_authenticate(self.advisor)
        for name in ("storefront:admin-order-list", "storefront:admin-service-list", "storefront:admin-stats"):
            with self.subTest(url=name):
                self.assertEqual(self.client.get(reverse(name)).status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_catalog_crud(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            reverse("storefront:admin-service-list"),
            {
                "slug": "tarot",
                "title": "Tarot",
                "short_desc": "Cards",
                "long_desc": "Three card spread",
                "price_cents": 1999,
                "currency": "usd",
                "delivery_hours": 12,
                "includes": ["3 cards"],
                "requirements": [],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["currency"], "USD")
        service_id = res.data["id"]

        res = self.client.patch(
            reverse("storefront:admin-service-detail", args=[service_id]),
            {"active": False},
            format="json",
        )
        self.assertFalse(res.data["active"])

        res = self.client.delete(reverse("storefront:admin-service-detail", args=[service_id]))
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)

    def test_admin_cannot_delete_service_with_orders(self):
        Order.objects.create(service=self.service, customer_email="a@example.com", amount_cents=2999)
        self.client.force_authenticate(self.admin)

        res = self.client.delete(reverse("storefront:admin-service-detail", args=[self.service.pk]))

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "SERVICE_IN_USE")

    def test_admin_order_status_and_filters(self):
        order = Order.objects.create(
            service=self.service,
            customer_email="a@example.com",
            amount_cents=2999,
            payment_status=Order.PAYMENT_PAID,
        )
        self.client.force_authenticate(self.admin)
        detail = reverse("storefront:admin-order-detail", args=[order.pk])

        res = self.client.patch(detail, {"status": "refunded"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["payment_status"], "refunded")

        res = self.client.patch(detail, {"status": "pending"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "INVALID_TRANSITION")

        res = self.client.get(reverse("storefront:admin-order-list"), {"status": "refunded"})
        self.assertEqual([o["id"] for o in res.data], [order.pk])

        res = self.client.get(reverse("storefront:admin-order-list"), {"status": "pending"})
        self.assertEqual(res.data, [])

    def test_admin_stats(self):
        Order.objects.create(
            service=self.service,
            customer_email="a@example.com",
            amount_cents=2999,
            payment_status=Order.PAYMENT_PAID,
        )
        self.client.force_authenticate(self.admin)

        res = self.client.get(reverse("storefront:admin-stats"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_orders"], 1)
        self.assertEqual(res.data["total_revenue_cents"], 2999)
        self.assertEqual(res.data["pending_orders"], 1)

    def test_admin_content_crud(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            reverse("storefront:admin-testimonial-list"),
            {"name": "New", "text": "Great", "rating": 6},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.post(
            reverse("storefront:admin-faq-list"),
            {"question": "Zero?", "answer": "Z", "sort_order": 0},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        public = self.client.get(reverse("storefront:faq"))
        self.assertEqual(public.data[0]["question"], "Zero?")
