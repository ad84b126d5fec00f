from .session import AdminChatSessionViewSet, ChatSessionViewSet

__all__ = [
    "AdminChatSessionViewSet",
    "ChatSessionViewSet",
]
