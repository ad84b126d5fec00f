# chat/services/message_log.py

"""
CHAT MESSAGE LOG

Append-only, session-scoped, ordered by id.

Polling contract:
- list_messages_since(session_id, since_id=k) returns every message with id > k
  in ascending id order. Re-polling with the max id seen never duplicates
  and never skips a committed message.
"""

from __future__ import annotations

from django.conf import settings
from django.utils import timezone

from chat.models import ChatMessage, ChatSession, normalize_sender_role
from chat.services.exceptions import ChatValidationError, SessionNotFoundError


def validate_sender_role(sender_role) -> str:
    role = normalize_sender_role(sender_role)
    if role not in ChatMessage.SENDER_ROLES:
        raise ChatValidationError(f"Invalid sender role: {sender_role}")
    return role


def validate_content(content) -> str:
    if not isinstance(content, str):
        raise ChatValidationError("Message content must be text")

    max_length = int(settings.CHAT_MESSAGE_MAX_LENGTH)
    if not content.strip():
        raise ChatValidationError("Message cannot be empty")
    if len(content) > max_length:
        raise ChatValidationError(f"Message cannot exceed {max_length} characters")

    return content


def validate_cursor(since_id) -> int:
    if since_id in (None, ""):
        return 0
    if isinstance(since_id, bool):
        raise ChatValidationError("since_id must be a non-negative integer")
    try:
        value = int(since_id)
    except (TypeError, ValueError):
        raise ChatValidationError("since_id must be a non-negative integer")
    if value < 0:
        raise ChatValidationError("since_id must be a non-negative integer")
    return value


def append_message(*, session_id, sender_role, content) -> ChatMessage:
    role = validate_sender_role(sender_role)
    content = validate_content(content)

    if not ChatSession.objects.filter(pk=session_id).exists():
        raise SessionNotFoundError(f"Chat session {session_id} not found")

    return ChatMessage.objects.create(
        session_id=session_id,
        sender_role=role,
        content=content,
        created_at=timezone.now(),
    )


def list_messages_since(*, session_id, since_id=0) -> list[ChatMessage]:
    since_id = validate_cursor(since_id)

    if not ChatSession.objects.filter(pk=session_id).exists():
        raise SessionNotFoundError(f"Chat session {session_id} not found")

    return list(
        ChatMessage.objects.filter(session_id=session_id, id__gt=since_id).order_by("id")
    )
