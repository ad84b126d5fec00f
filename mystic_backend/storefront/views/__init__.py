from .admin import (
    AdminFaqViewSet,
    AdminOrderViewSet,
    AdminServiceViewSet,
    AdminStatsView,
    AdminTestimonialViewSet,
)
from .public import (
    PublicFaqListView,
    PublicOrderViewSet,
    PublicServiceViewSet,
    PublicTestimonialListView,
)

__all__ = [
    "AdminFaqViewSet",
    "AdminOrderViewSet",
    "AdminServiceViewSet",
    "AdminStatsView",
    "AdminTestimonialViewSet",
    "PublicFaqListView",
    "PublicOrderViewSet",
    "PublicServiceViewSet",
    "PublicTestimonialListView",
]
