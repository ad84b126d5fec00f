from .content import FaqItem, Testimonial
from .order import Order, OrderIntake
from .service import Service

__all__ = [
    "FaqItem",
    "Order",
    "OrderIntake",
    "Service",
    "Testimonial",
]
