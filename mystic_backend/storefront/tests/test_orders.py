# storefront/tests/test_orders.py

from __future__ import annotations

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from chat.models import ChatSession
from storefront.models import FaqItem, Order, Service, Testimonial
from storefront.services import order_service
from storefront.services.exceptions import (
    IntakeAlreadySubmittedError,
    InvalidOrderTransitionError,
    OrderNotFoundError,
    ServiceInUseError,
    ServiceNotFoundError,
    StorefrontValidationError,
)
from storefront.services.order_lifecycle import TERMINAL_STATES, can_transition


def _service(**overrides):
    data = {
        "slug": "psychic-reading",
        "title": "Psychic Reading",
        "short_desc": "Short",
        "long_desc": "Long",
        "price_cents": 2999,
        "delivery_hours": 24,
    }
    data.update(overrides)
    return Service.objects.create(**data)


class OrderServiceTests(TestCase):
    """
    GUARANTEES:
    - amount is locked from the service price at creation
    - refunded/cancelled are terminal; refund needs a paid order
    - one intake per order
    """

    def setUp(self):
        self.service = _service()

    def test_create_order_locks_price_and_marks_paid(self):
        order = order_service.create_order(
            service_id=self.service.pk,
            customer_email="Buyer@Example.com",
            payment_provider="paypal",
        )

        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(order.payment_status, Order.PAYMENT_PAID)
        self.assertEqual(order.amount_cents, 2999)
        self.assertEqual(order.customer_email, "buyer@example.com")

        self.service.price_cents = 3999
        self.service.save()
        order.refresh_from_db()
        self.assertEqual(order.amount_cents, 2999)

        order.amount_cents = 1
        with self.assertRaises(ValueError):
            order.save()

    def test_create_order_rejects_inactive_or_missing_service(self):
        hidden = _service(slug="hidden", active=False)

        with self.assertRaises(ServiceNotFoundError):
            order_service.create_order(service_id=hidden.pk, customer_email="a@example.com")

        with self.assertRaises(ServiceNotFoundError):
            order_service.create_order(service_id=99999, customer_email="a@example.com")

        with self.assertRaises(StorefrontValidationError):
            order_service.create_order(
                service_id=self.service.pk,
                customer_email="a@example.com",
                payment_provider="bitcoin",
            )

    def test_status_transitions(self):
        self.assertTrue(can_transition(from_status="pending", to_status="in_progress"))
        self.assertTrue(can_transition(from_status="delivered", to_status="refunded"))
        self.assertFalse(can_transition(from_status="refunded", to_status="pending"))
        self.assertFalse(can_transition(from_status="cancelled", to_status="delivered"))
        self.assertFalse(can_transition(from_status="delivered", to_status="cancelled"))
        self.assertEqual(TERMINAL_STATES, {Order.STATUS_REFUNDED, Order.STATUS_CANCELLED})

    def test_refund_marks_payment_refunded_and_is_terminal(self):
        order = order_service.create_order(service_id=self.service.pk, customer_email="a@example.com")

        order_service.update_order_status(order_id=order.pk, status=Order.STATUS_DELIVERED)
        order = order_service.update_order_status(order_id=order.pk, status=Order.STATUS_REFUNDED)

        self.assertEqual(order.payment_status, Order.PAYMENT_REFUNDED)

        with self.assertRaises(InvalidOrderTransitionError):
            order_service.update_order_status(order_id=order.pk, status=Order.STATUS_IN_PROGRESS)

    def test_refund_requires_paid_order(self):
        order = Order.objects.create(
            service=self.service,
            customer_email="a@example.com",
            amount_cents=2999,
            payment_status=Order.PAYMENT_UNPAID,
        )

        with self.assertRaises(InvalidOrderTransitionError):
            order_service.update_order_status(order_id=order.pk, status=Order.STATUS_REFUNDED)

    def test_unknown_order_and_status(self):
        with self.assertRaises(OrderNotFoundError):
            order_service.update_order_status(order_id=424242, status=Order.STATUS_DELIVERED)

        order = order_service.create_order(service_id=self.service.pk, customer_email="a@example.com")
        with self.assertRaises(StorefrontValidationError):
            order_service.update_order_status(order_id=order.pk, status="shipped")

    def test_intake_once_per_order_with_validation(self):
        order = order_service.create_order(service_id=self.service.pk, customer_email="a@example.com")

        with self.assertRaises(StorefrontValidationError):
            order_service.submit_intake(order_id=order.pk, full_name="A", question="Will I find love soon?")

        with self.assertRaises(StorefrontValidationError):
            order_service.submit_intake(order_id=order.pk, full_name="Ann Lee", question="Love?")

        intake = order_service.submit_intake(
            order_id=order.pk,
            full_name="Ann Lee",
            question="Will I find love soon?",
            details={"mood": "hopeful"},
        )
        self.assertIsNone(intake.dob)
        self.assertEqual(intake.details, {"mood": "hopeful"})

        with self.assertRaises(IntakeAlreadySubmittedError):
            order_service.submit_intake(order_id=order.pk, full_name="Ann Lee", question="Another question here")

    def test_service_with_orders_cannot_be_deleted(self):
        order_service.create_order(service_id=self.service.pk, customer_email="a@example.com")

        with self.assertRaises(ServiceInUseError):
            order_service.delete_service(service=self.service)

    def test_stats(self):
        first = order_service.create_order(service_id=self.service.pk, customer_email="a@example.com")
        second = order_service.create_order(service_id=self.service.pk, customer_email="b@example.com")
        order_service.create_order(service_id=self.service.pk, customer_email="c@example.com")

        order_service.update_order_status(order_id=first.pk, status=Order.STATUS_DELIVERED)
        order_service.update_order_status(order_id=second.pk, status=Order.STATUS_REFUNDED)

        ChatSession.objects.create(customer_id="x@example.com", duration_minutes=5, credits_used_cents=1495)

        stats = order_service.get_stats()

        self.assertEqual(stats["total_orders"], 3)
        self.assertEqual(stats["total_revenue_cents"], 2999 * 2)
        self.assertEqual(stats["pending_orders"], 1)
        self.assertEqual(stats["delivered_orders"], 1)
        self.assertEqual(stats["pending_chat_sessions"], 1)
        self.assertEqual(stats["active_chat_sessions"], 0)


class SeedStorefrontTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_storefront", "--admin-password", "s3cret-pass", stdout=StringIO())
        call_command("seed_storefront", "--admin-password", "s3cret-pass", stdout=StringIO())

        self.assertEqual(Service.objects.count(), 3)
        self.assertEqual(Service.objects.get(slug="psychic-reading").price_cents, 2999)
        self.assertEqual(Service.objects.get(slug="telepathy-mind-reading").price_cents, 4999)
        self.assertEqual(Testimonial.objects.count(), 3)
        self.assertEqual(
            list(FaqItem.objects.values_list("sort_order", flat=True)),
            list(range(1, FaqItem.objects.count() + 1)),
        )

        from django.contrib.auth import get_user_model

        admin = get_user_model().objects.get(email="admin@mystictxt.com")
        self.assertEqual(admin.role, "admin")
        self.assertTrue(admin.check_password("s3cret-pass"))
