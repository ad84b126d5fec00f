# chat/serializers/session.py

from rest_framework import serializers

from chat.models import ChatMessage, ChatSession


class ChatSessionSerializer(serializers.ModelSerializer):
    """
    Session snapshot for pollers.
    expires_at / remaining_seconds drive the client countdown only.
    """

    status_label = serializers.SerializerMethodField()
    expires_at = serializers.DateTimeField(read_only=True)
    remaining_seconds = serializers.SerializerMethodField()

    class Meta:
        model = ChatSession
        fields = [
            "id",
            "customer_id",
            "status",
            "status_label",
            "duration_minutes",
            "credits_used_cents",
            "started_at",
            "ended_at",
            "expires_at",
            "remaining_seconds",
            "accepted_by",
            "ended_by",
            "end_reason",
            "created_at",
        ]
        read_only_fields = fields

    def get_status_label(self, obj):
        return ChatSession.STATUS_ENUM.get(obj.status, {}).get("label", obj.status)

    def get_remaining_seconds(self, obj):
        return obj.remaining_seconds()


class ChatMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ChatMessage
        fields = [
            "id",
            "session",
            "sender_role",
            "content",
            "created_at",
        ]
        read_only_fields = fields


class RequestSessionSerializer(serializers.Serializer):
    # Range is enforced by the session lifecycle (VALIDATION_ERROR envelope).
    duration_minutes = serializers.IntegerField()


class PostMessageSerializer(serializers.Serializer):
    # Length/emptiness are enforced by the message log so the API and
    # service layer share one rule.
    content = serializers.CharField(trim_whitespace=False, allow_blank=True)
