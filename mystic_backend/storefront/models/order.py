# storefront/models/order.py

"""
ORDERS + INTAKE

Order:
- amount_cents/currency are copied from the service at creation (price lock)
- status moves only through storefront.services.order_lifecycle

OrderIntake:
- The customer's questionnaire for an order (one per order, immutable)
"""

from django.db import models
from django.utils import timezone

from .service import Service


class Order(models.Model):
    STATUS_PENDING = "pending"
    STATUS_IN_PROGRESS = "in_progress"
    STATUS_DELIVERED = "delivered"
    STATUS_REFUNDED = "refunded"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_IN_PROGRESS, "In progress"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_REFUNDED, "Refunded"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    STATUS_ENUM = {
        STATUS_PENDING: {"label": "Pending", "terminal": False},
        STATUS_IN_PROGRESS: {"label": "In progress", "terminal": False},
        STATUS_DELIVERED: {"label": "Delivered", "terminal": False},
        STATUS_REFUNDED: {"label": "Refunded", "terminal": True},
        STATUS_CANCELLED: {"label": "Cancelled", "terminal": True},
    }

    PROVIDER_STRIPE = "stripe"
    PROVIDER_PAYPAL = "paypal"

    PROVIDER_CHOICES = [
        (PROVIDER_STRIPE, "Stripe"),
        (PROVIDER_PAYPAL, "PayPal"),
    ]

    PAYMENT_UNPAID = "unpaid"
    PAYMENT_PAID = "paid"
    PAYMENT_REFUNDED = "refunded"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_UNPAID, "Unpaid"),
        (PAYMENT_PAID, "Paid"),
        (PAYMENT_REFUNDED, "Refunded"),
    ]

    service = models.ForeignKey(
        Service,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    customer_email = models.EmailField(db_index=True)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )

    payment_provider = models.CharField(
        max_length=16,
        choices=PROVIDER_CHOICES,
        default=PROVIDER_STRIPE,
    )

    payment_status = models.CharField(
        max_length=16,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_UNPAID,
    )

    amount_cents = models.PositiveIntegerField()
    currency = models.CharField(max_length=3, default="USD")

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Order.objects.filter(pk=self.pk).values("amount_cents", "currency", "service_id").first()
            if previous is not None and (
                previous["amount_cents"] != self.amount_cents
                or previous["currency"] != self.currency
                or previous["service_id"] != self.service_id
            ):
                raise ValueError("Order amount and service are locked at creation.")

        super().save(*args, **kwargs)

    def __str__(self):
        return f"Order {self.pk} | {self.customer_email} | {self.status}"


class OrderIntake(models.Model):
    order = models.OneToOneField(
        Order,
        on_delete=models.PROTECT,
        related_name="intake",
    )

    full_name = models.CharField(max_length=200)
    dob = models.CharField(max_length=32, blank=True, null=True)
    question = models.TextField()
    details = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("Order intake cannot be edited once submitted")
        super().save(*args, **kwargs)

    def __str__(self):
        return f"Intake for order {self.order_id}"
