from .catalog import FaqItemSerializer, ServiceSerializer, TestimonialSerializer
from .order import (
    AdminOrderSerializer,
    CreateOrderSerializer,
    OrderIntakeSerializer,
    OrderSerializer,
    SubmitIntakeSerializer,
    UpdateOrderStatusSerializer,
)

__all__ = [
    "AdminOrderSerializer",
    "CreateOrderSerializer",
    "FaqItemSerializer",
    "OrderIntakeSerializer",
    "OrderSerializer",
    "ServiceSerializer",
    "SubmitIntakeSerializer",
    "TestimonialSerializer",
    "UpdateOrderStatusSerializer",
]
