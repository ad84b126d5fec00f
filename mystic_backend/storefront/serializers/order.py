# storefront/serializers/order.py

from rest_framework import serializers

from storefront.models import Order, OrderIntake


class OrderIntakeSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderIntake
        fields = ["id", "order", "full_name", "dob", "question", "details", "created_at"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """
    Order read model. Amount is the price locked at creation.
    """

    service_title = serializers.CharField(source="service.title", read_only=True)
    service_slug = serializers.CharField(source="service.slug", read_only=True)
    status_label = serializers.SerializerMethodField()
    has_intake = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "service",
            "service_title",
            "service_slug",
            "customer_email",
            "status",
            "status_label",
            "payment_provider",
            "payment_status",
            "amount_cents",
            "currency",
            "has_intake",
            "created_at",
        ]
        read_only_fields = fields

    def get_status_label(self, obj):
        return Order.STATUS_ENUM.get(obj.status, {}).get("label", obj.status)

    def get_has_intake(self, obj):
        return hasattr(obj, "intake")


class AdminOrderSerializer(OrderSerializer):
    intake = OrderIntakeSerializer(read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["intake", "updated_at"]
        read_only_fields = fields


# ---------------- COMMANDS ----------------

class CreateOrderSerializer(serializers.Serializer):
    email = serializers.EmailField()
    service_id = serializers.IntegerField(min_value=1)
    payment_provider = serializers.ChoiceField(
        choices=[choice for choice, _ in Order.PROVIDER_CHOICES],
        default=Order.PROVIDER_STRIPE,
    )


class SubmitIntakeSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=200)
    dob = serializers.CharField(max_length=32, required=False, allow_null=True, allow_blank=True)
    question = serializers.CharField()
    details = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False, default=dict)


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[choice for choice, _ in Order.STATUS_CHOICES])
