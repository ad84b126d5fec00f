# storefront/serializers/catalog.py

from rest_framework import serializers

from storefront.models import FaqItem, Service, Testimonial


def _validate_text_list(value, field):
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise serializers.ValidationError(f"{field} must be a list of strings")
    return value


class ServiceSerializer(serializers.ModelSerializer):
    """
    Catalog service (admin CRUD + public read).
    """

    class Meta:
        model = Service
        fields = [
            "id",
            "slug",
            "title",
            "short_desc",
            "long_desc",
            "price_cents",
            "currency",
            "delivery_hours",
            "includes",
            "requirements",
            "image_url",
            "active",
        ]
        read_only_fields = ["id"]

    def validate_includes(self, value):
        return _validate_text_list(value, "includes")

    def validate_requirements(self, value):
        return _validate_text_list(value, "requirements")

    def validate_currency(self, value):
        return (value or "").strip().upper()


class TestimonialSerializer(serializers.ModelSerializer):
    class Meta:
        model = Testimonial
        fields = ["id", "name", "text", "rating", "active"]
        read_only_fields = ["id"]


class FaqItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = FaqItem
        fields = ["id", "question", "answer", "sort_order", "active"]
        read_only_fields = ["id"]
