# chat/models/message.py

"""
CHAT MESSAGE (IMMUTABLE, APPEND-ONLY)

Purpose:
- Ordered conversation log of a session.
- The auto-increment id is global across sessions, which makes it a safe
  polling cursor (?since_id=<last seen id>).
"""

from django.db import models
from django.utils import timezone

from .session import ChatSession


def normalize_sender_role(value) -> str:
    """
    Map wire values onto the closed sender-role set.
    "psychic" is the legacy name for the advisor side.
    """
    role = str(value or "").strip().lower()
    if role == ChatMessage.LEGACY_ADVISOR_ROLE:
        return ChatMessage.SENDER_ADVISOR
    return role


class ChatMessage(models.Model):
    SENDER_CUSTOMER = "customer"
    SENDER_ADVISOR = "advisor"
    SENDER_SYSTEM = "system"

    SENDER_CHOICES = [
        (SENDER_CUSTOMER, "Customer"),
        (SENDER_ADVISOR, "Advisor"),
        (SENDER_SYSTEM, "System"),
    ]

    SENDER_ROLES = {SENDER_CUSTOMER, SENDER_ADVISOR, SENDER_SYSTEM}

    LEGACY_ADVISOR_ROLE = "psychic"

    session = models.ForeignKey(
        ChatSession,
        on_delete=models.PROTECT,
        related_name="messages",
    )

    sender_role = models.CharField(max_length=16, choices=SENDER_CHOICES)

    # Length (1..CHAT_MESSAGE_MAX_LENGTH) is enforced by chat.services.message_log
    content = models.TextField()

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["session", "id"], name="chat_message_cursor_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("ChatMessage records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("ChatMessage records cannot be deleted")

    def __str__(self):
        return f"{self.sender_role} @ session {self.session_id}: {self.content[:40]}"
