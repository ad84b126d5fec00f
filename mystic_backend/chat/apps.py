# chat/apps.py

"""
CHAT APP CONFIG

Timed, prepaid live consultations:
- Sessions move pending -> active -> ended
- Messages are an append-only log polled by id cursor
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Live Chat"
