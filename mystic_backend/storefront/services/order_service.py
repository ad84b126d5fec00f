"""
======================================================
PATH: storefront/services/order_service.py
======================================================
ORDER SERVICE

Purpose:
- Place orders for catalog services (price locked at creation).
- Record the customer's intake questionnaire (once per order).
- Apply admin status changes through the order lifecycle.

Payment:
- Capturing money is the payment provider's job. By the time an order is
  created here the provider has reported it as paid.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import ProtectedError, Q, Sum
from django.utils import timezone

from chat.models import ChatSession
from chat.services.session_service import materialize_expiry
from storefront.models import Order, OrderIntake, Service
from storefront.services.exceptions import (
    IntakeAlreadySubmittedError,
    OrderNotFoundError,
    ServiceInUseError,
    ServiceNotFoundError,
    StorefrontValidationError,
)
from storefront.services.order_lifecycle import validate_transition

logger = logging.getLogger(__name__)

PROVIDERS = {choice for choice, _ in Order.PROVIDER_CHOICES}
STATUSES = {choice for choice, _ in Order.STATUS_CHOICES}

MIN_FULL_NAME_LENGTH = 2
MIN_QUESTION_LENGTH = 10


# ============================================================
# CATALOG
# ============================================================

def delete_service(*, service: Service):
    try:
        service.delete()
    except ProtectedError:
        raise ServiceInUseError(
            "This service has orders and cannot be deleted. Deactivate it instead."
        )


# ============================================================
# ORDERS
# ============================================================

@transaction.atomic
def create_order(*, service_id, customer_email: str, payment_provider: str = Order.PROVIDER_STRIPE) -> Order:
    customer_email = (customer_email or "").strip().lower()
    if not customer_email:
        raise StorefrontValidationError("Valid email required")

    if payment_provider not in PROVIDERS:
        raise StorefrontValidationError(f"Unsupported payment provider: {payment_provider}")

    service = Service.objects.filter(pk=service_id, active=True).first()
    if service is None:
        raise ServiceNotFoundError("Service not found")

    order = Order.objects.create(
        service=service,
        customer_email=customer_email,
        status=Order.STATUS_PENDING,
        payment_provider=payment_provider,
        payment_status=Order.PAYMENT_PAID,
        amount_cents=service.price_cents,
        currency=service.currency,
        created_at=timezone.now(),
    )

    logger.info(
        "Order placed",
        extra={"order_id": order.pk, "service_id": service.pk, "amount_cents": order.amount_cents},
    )
    return order


@transaction.atomic
def update_order_status(*, order_id, status: str) -> Order:
    if status not in STATUSES:
        raise StorefrontValidationError(f"Invalid status: {status}")

    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise OrderNotFoundError("Order not found")

    if order.status == status:
        return order

    validate_transition(order=order, target_status=status)

    order.status = status
    update_fields = ["status", "updated_at"]

    if status == Order.STATUS_REFUNDED:
        order.payment_status = Order.PAYMENT_REFUNDED
        update_fields.append("payment_status")

    order.save(update_fields=update_fields)

    logger.info("Order status changed", extra={"order_id": order.pk, "status": status})
    return order


@transaction.atomic
def submit_intake(*, order_id, full_name: str, question: str, dob=None, details=None) -> OrderIntake:
    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise OrderNotFoundError("Order not found")

    if OrderIntake.objects.filter(order=order).exists():
        raise IntakeAlreadySubmittedError("Intake already submitted")

    full_name = (full_name or "").strip()
    question = (question or "").strip()

    if len(full_name) < MIN_FULL_NAME_LENGTH:
        raise StorefrontValidationError(f"Full name must be at least {MIN_FULL_NAME_LENGTH} characters")
    if len(question) < MIN_QUESTION_LENGTH:
        raise StorefrontValidationError(f"Question must be at least {MIN_QUESTION_LENGTH} characters")

    details = details or {}
    if not isinstance(details, dict) or not all(isinstance(v, str) for v in details.values()):
        raise StorefrontValidationError("details must be an object of text values")

    return OrderIntake.objects.create(
        order=order,
        full_name=full_name,
        dob=(dob or None),
        question=question,
        details=details,
        created_at=timezone.now(),
    )


# ============================================================
# ADMIN STATS
# ============================================================

def get_stats() -> dict:
    orders = Order.objects.all()

    revenue = orders.filter(payment_status=Order.PAYMENT_PAID).aggregate(total=Sum("amount_cents")).get("total")

    # Live counts must not show overdue sessions as active.
    now = timezone.now()
    live = [
        materialize_expiry(s, now=now)
        for s in ChatSession.objects.exclude(status=ChatSession.STATUS_ENDED)
    ]

    return {
        "total_orders": orders.count(),
        "total_revenue_cents": int(revenue or 0),
        "pending_orders": orders.filter(
            Q(status=Order.STATUS_PENDING) | Q(status=Order.STATUS_IN_PROGRESS)
        ).count(),
        "delivered_orders": orders.filter(status=Order.STATUS_DELIVERED).count(),
        "active_chat_sessions": sum(1 for s in live if s.status == ChatSession.STATUS_ACTIVE),
        "pending_chat_sessions": sum(1 for s in live if s.status == ChatSession.STATUS_PENDING),
    }
