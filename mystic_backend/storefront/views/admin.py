# storefront/views/admin.py
"""
STOREFRONT ADMIN CONSOLE

/api/store/admin/services/       CRUD      (catalog.manage)
/api/store/admin/testimonials/   CRUD      (content.manage)
/api/store/admin/faq/            CRUD      (content.manage)
/api/store/admin/orders/         list/retrieve + PATCH status (orders.manage)
/api/store/admin/stats/          dashboard numbers (orders.manage)
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import service_error_response
from permissions.roles import (
    CAP_CATALOG_MANAGE,
    CAP_CONTENT_MANAGE,
    CAP_ORDERS_MANAGE,
    HasCapability,
)
from storefront.models import FaqItem, Order, Service, Testimonial
from storefront.serializers import (
    AdminOrderSerializer,
    FaqItemSerializer,
    ServiceSerializer,
    TestimonialSerializer,
    UpdateOrderStatusSerializer,
)
from storefront.services import order_service
from storefront.services.exceptions import StorefrontServiceError


class AdminServiceViewSet(viewsets.ModelViewSet):
    queryset = Service.objects.all().order_by("id")
    serializer_class = ServiceSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_CATALOG_MANAGE
    lookup_value_regex = r"\d+"

    def destroy(self, request, *args, **kwargs):
        try:
            order_service.delete_service(service=self.get_object())
        except StorefrontServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminTestimonialViewSet(viewsets.ModelViewSet):
    queryset = Testimonial.objects.all().order_by("id")
    serializer_class = TestimonialSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_CONTENT_MANAGE
    lookup_value_regex = r"\d+"


class AdminFaqViewSet(viewsets.ModelViewSet):
    queryset = FaqItem.objects.all().order_by("sort_order", "id")
    serializer_class = FaqItemSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_CONTENT_MANAGE
    lookup_value_regex = r"\d+"


class AdminOrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Orders newest first; filter with ?status=&payment_status=&payment_provider=.
    Status changes go through the order lifecycle (refund marks payment refunded).
    """

    queryset = Order.objects.select_related("service", "intake").order_by("-created_at", "-id")
    serializer_class = AdminOrderSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ORDERS_MANAGE
    filterset_fields = ["status", "payment_status", "payment_provider"]
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "patch", "head", "options"]

    @extend_schema(request=UpdateOrderStatusSerializer, responses=AdminOrderSerializer)
    def partial_update(self, request, pk=None):
        command = UpdateOrderStatusSerializer(data=request.data)
        command.is_valid(raise_exception=True)

        try:
            order = order_service.update_order_status(
                order_id=pk,
                status=command.validated_data["status"],
            )
        except StorefrontServiceError as exc:
            return service_error_response(exc)

        return Response(AdminOrderSerializer(order).data)


class AdminStatsView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ORDERS_MANAGE

    @extend_schema(responses={200: dict})
    def get(self, request):
        return Response(order_service.get_stats())
