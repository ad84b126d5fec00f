# storefront/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AdminFaqViewSet,
    AdminOrderViewSet,
    AdminServiceViewSet,
    AdminStatsView,
    AdminTestimonialViewSet,
    PublicFaqListView,
    PublicOrderViewSet,
    PublicServiceViewSet,
    PublicTestimonialListView,
)

app_name = "storefront"

router = DefaultRouter()
# ---------------- PUBLIC ----------------
router.register(r"services", PublicServiceViewSet, basename="service")
router.register(r"orders", PublicOrderViewSet, basename="order")
# ---------------- ADMIN ----------------
router.register(r"admin/services", AdminServiceViewSet, basename="admin-service")
router.register(r"admin/testimonials", AdminTestimonialViewSet, basename="admin-testimonial")
router.register(r"admin/faq", AdminFaqViewSet, basename="admin-faq")
router.register(r"admin/orders", AdminOrderViewSet, basename="admin-order")

urlpatterns = [
    path("testimonials/", PublicTestimonialListView.as_view(), name="testimonials"),
    path("faq/", PublicFaqListView.as_view(), name="faq"),
    path("admin/stats/", AdminStatsView.as_view(), name="admin-stats"),
    path("", include(router.urls)),
]
