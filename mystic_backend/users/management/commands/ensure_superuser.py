# users/management/commands/ensure_superuser.py
"""
Bootstrap the first admin on a fresh deploy.

Email and password come from --email/--password or AUTO_ADMIN_EMAIL /
AUTO_ADMIN_PASSWORD. Re-running promotes an existing account to admin and
resets its password. The password is never printed.
"""

from __future__ import annotations

import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction


class Command(BaseCommand):
    help = "Create or promote the bootstrap admin account (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=os.environ.get("AUTO_ADMIN_EMAIL", ""))
        parser.add_argument("--password", default=os.environ.get("AUTO_ADMIN_PASSWORD", ""))

    @transaction.atomic
    def handle(self, *args, **options):
        email = (options["email"] or "").strip().lower()
        password = (options["password"] or "").strip()

        if not email or not password:
            self.stdout.write(self.style.WARNING("No admin credentials configured; nothing to do."))
            return

        User = get_user_model()
        user = User.objects.select_for_update().filter(email__iexact=email).first()

        if user is None:
            User.objects.create_superuser(email=email, password=password)
            self.stdout.write(self.style.SUCCESS(f"Admin {email} created"))
            return

        user.role = User.ROLE_ADMIN
        user.is_active = user.is_staff = user.is_superuser = True
        user.set_password(password)
        user.save(update_fields=["role", "is_active", "is_staff", "is_superuser", "password", "updated_at"])
        self.stdout.write(self.style.SUCCESS(f"Admin {email} promoted/updated"))
