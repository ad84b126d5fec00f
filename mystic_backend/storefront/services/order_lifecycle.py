"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Order entities.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth
"""

from storefront.models import Order
from storefront.services.exceptions import InvalidOrderTransitionError

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {status for status, meta in Order.STATUS_ENUM.items() if meta["terminal"]}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_IN_PROGRESS,
        Order.STATUS_DELIVERED,
        Order.STATUS_REFUNDED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_IN_PROGRESS: {
        Order.STATUS_PENDING,
        Order.STATUS_DELIVERED,
        Order.STATUS_REFUNDED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_DELIVERED: {
        Order.STATUS_IN_PROGRESS,
        Order.STATUS_REFUNDED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(
        from_status=order.status,
        to_status=target_status,
    ):
        raise InvalidOrderTransitionError(
            f"Order {order.pk} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )

    if target_status == Order.STATUS_REFUNDED and order.payment_status != Order.PAYMENT_PAID:
        raise InvalidOrderTransitionError(
            f"Order {order.pk} cannot be refunded: payment status is '{order.payment_status}'"
        )
