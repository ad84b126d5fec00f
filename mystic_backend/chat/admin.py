# chat/admin.py

from django.contrib import admin

from chat.models import ChatMessage, ChatSession


class ChatMessageInline(admin.TabularInline):
    model = ChatMessage
    extra = 0
    can_delete = False
    fields = ("id", "sender_role", "content", "created_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


# ======================================================
# CHAT SESSION ADMIN (READ-ONLY; transitions go through the API)
# ======================================================


@admin.register(ChatSession)
class ChatSessionAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer_id",
        "status",
        "duration_minutes",
        "credits_used_cents",
        "started_at",
        "ended_at",
        "end_reason",
    )
    readonly_fields = (
        "customer_id",
        "status",
        "duration_minutes",
        "credits_used_cents",
        "started_at",
        "ended_at",
        "accepted_by",
        "ended_by",
        "end_reason",
        "created_at",
    )
    search_fields = ("customer_id", "accepted_by")
    list_filter = ("status", "end_reason", "created_at")
    inlines = [ChatMessageInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
