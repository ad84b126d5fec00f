# chat/management/commands/expire_chat_sessions.py

from django.core.management.base import BaseCommand

from chat.services.session_service import expire_overdue_sessions


class Command(BaseCommand):
    help = "End every active chat session whose paid time has elapsed (safe to run from cron)."

    def handle(self, *args, **options):
        ended = expire_overdue_sessions()
        self.stdout.write(self.style.SUCCESS(f"Expired {ended} chat session(s)."))
