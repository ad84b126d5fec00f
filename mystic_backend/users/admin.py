# users/admin.py
"""
Staff accounts (admins, advisors) are created here; the public API only
registers customers.
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    ordering = ("email",)
    list_display = ("email", "role", "is_active", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("email", "first_name", "last_name")
    readonly_fields = ("created_at", "updated_at", "last_login")
    actions = ["make_advisor", "make_customer"]

    fieldsets = (
        (None, {"fields": ("email", "password", "role")}),
        ("Profile", {"fields": ("first_name", "last_name")}),
        ("Access", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Activity", {"fields": ("last_login", "created_at", "updated_at")}),
    )

    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "role", "password1", "password2")}),
    )

    @admin.action(description="Make selected users chat advisors")
    def make_advisor(self, request, queryset):
        updated = queryset.exclude(role=User.ROLE_ADMIN).update(role=User.ROLE_ADVISOR, is_staff=True)
        self.message_user(request, f"{updated} user(s) can now answer live chats.")

    @admin.action(description="Demote selected advisors to customers")
    def make_customer(self, request, queryset):
        updated = queryset.filter(role=User.ROLE_ADVISOR).update(role=User.ROLE_CUSTOMER, is_staff=False)
        self.message_user(request, f"{updated} advisor(s) demoted.")
