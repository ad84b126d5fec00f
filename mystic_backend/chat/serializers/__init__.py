from .session import (
    ChatMessageSerializer,
    ChatSessionSerializer,
    PostMessageSerializer,
    RequestSessionSerializer,
)

__all__ = [
    "ChatMessageSerializer",
    "ChatSessionSerializer",
    "PostMessageSerializer",
    "RequestSessionSerializer",
]
