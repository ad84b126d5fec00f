# storefront/admin.py

from django.contrib import admin

from storefront.models import FaqItem, Order, OrderIntake, Service, Testimonial


# ======================================================
# CATALOG
# ======================================================


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("title", "slug", "price_cents", "currency", "delivery_hours", "active")
    list_filter = ("active", "currency")
    search_fields = ("title", "slug")
    prepopulated_fields = {"slug": ("title",)}


# ======================================================
# ORDERS
# ======================================================


class OrderIntakeInline(admin.StackedInline):
    model = OrderIntake
    extra = 0
    can_delete = False
    readonly_fields = ("full_name", "dob", "question", "details", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer_email",
        "service",
        "status",
        "payment_status",
        "payment_provider",
        "amount_cents",
        "created_at",
    )
    readonly_fields = (
        "service",
        "customer_email",
        "status",
        "payment_provider",
        "payment_status",
        "amount_cents",
        "currency",
        "created_at",
        "updated_at",
    )
    search_fields = ("customer_email",)
    list_filter = ("status", "payment_status", "payment_provider", "created_at")
    inlines = [OrderIntakeInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ======================================================
# CONTENT
# ======================================================


@admin.register(Testimonial)
class TestimonialAdmin(admin.ModelAdmin):
    list_display = ("name", "rating", "active")
    list_filter = ("active", "rating")


@admin.register(FaqItem)
class FaqItemAdmin(admin.ModelAdmin):
    list_display = ("question", "sort_order", "active")
    list_editable = ("sort_order", "active")
    list_filter = ("active",)
