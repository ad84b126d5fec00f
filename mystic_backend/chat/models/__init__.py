from .message import ChatMessage, normalize_sender_role
from .session import ChatSession

__all__ = [
    "ChatMessage",
    "ChatSession",
    "normalize_sender_role",
]
