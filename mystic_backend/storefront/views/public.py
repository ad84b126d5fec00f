# storefront/views/public.py
"""
PUBLIC STOREFRONT (AllowAny)

GET  /api/store/services/               active catalog
GET  /api/store/services/<slug>/        one active service
GET  /api/store/testimonials/           active testimonials
GET  /api/store/faq/                    active FAQ (sort order)
POST /api/store/orders/                 place an order
GET  /api/store/orders/<id>/            order confirmation
POST /api/store/orders/<id>/intake/     submit the reading questionnaire
"""

from __future__ import annotations

from django.conf import settings
from django.db import DatabaseError
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.generics import ListAPIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from backend.api_errors import internal_error_response, service_error_response
from storefront.models import FaqItem, Order, Service, Testimonial
from storefront.serializers import (
    CreateOrderSerializer,
    FaqItemSerializer,
    OrderIntakeSerializer,
    OrderSerializer,
    ServiceSerializer,
    SubmitIntakeSerializer,
    TestimonialSerializer,
)
from storefront.services import order_service
from storefront.services.exceptions import StorefrontServiceError


class PublicWriteThrottle(AnonRateThrottle):
    """
    For public write endpoints (place order, submit intake).
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['public_write'].
    """

    scope = "public_write"


# ======================================================
# CATALOG + CONTENT
# ======================================================

class PublicServiceViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Service.objects.filter(active=True).order_by("id")
    serializer_class = ServiceSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    lookup_field = "slug"


class PublicTestimonialListView(ListAPIView):
    queryset = Testimonial.objects.filter(active=True).order_by("id")
    serializer_class = TestimonialSerializer
    permission_classes = [AllowAny]
    authentication_classes = []


class PublicFaqListView(ListAPIView):
    queryset = FaqItem.objects.filter(active=True).order_by("sort_order", "id")
    serializer_class = FaqItemSerializer
    permission_classes = [AllowAny]
    authentication_classes = []


# ======================================================
# ORDERS
# ======================================================

class PublicOrderViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Guest checkout. The payment provider has already captured the payment
    when the order is placed.
    """

    serializer_class = OrderSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    lookup_value_regex = r"\d+"

    queryset = Order.objects.select_related("service")

    def get_throttles(self):
        if settings.TESTING:
            return []
        if self.request.method == "POST":
            return [PublicWriteThrottle()]
        return super().get_throttles()

    @extend_schema(request=CreateOrderSerializer, responses=OrderSerializer)
    def create(self, request):
        command = CreateOrderSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            order = order_service.create_order(
                service_id=data["service_id"],
                customer_email=data["email"],
                payment_provider=data["payment_provider"],
            )
        except StorefrontServiceError as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="store.create_order")

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=SubmitIntakeSerializer, responses=OrderIntakeSerializer)
    @action(detail=True, methods=["post"], url_path="intake")
    def intake(self, request, pk=None):
        command = SubmitIntakeSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            intake = order_service.submit_intake(
                order_id=pk,
                full_name=data["full_name"],
                question=data["question"],
                dob=data.get("dob"),
                details=data.get("details"),
            )
        except StorefrontServiceError as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="store.submit_intake")

        return Response(OrderIntakeSerializer(intake).data, status=status.HTTP_201_CREATED)
