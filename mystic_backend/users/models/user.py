"""
PATH: users/models/user.py

CUSTOM USER MODEL

Identity rules:
- Email is the canonical identity (login + wallet/chat ownership key).
- Role decides what the user may do:
  - customer: buys services, tops up a wallet, requests live chats
  - advisor:  answers live chats (accept + reply)
  - admin:    everything, including ending chats and granting credits
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models

from users.identity import canonical_email


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, email=None, password=None, **extra_fields):
        email = (email or "").strip()
        if not email:
            raise ValueError("An email address is required")

        email = canonical_email(self.normalize_email(email))
        extra_fields.setdefault("is_active", True)

        role = extra_fields.get("role") or User.ROLE_CUSTOMER
        extra_fields["role"] = role
        extra_fields.setdefault("is_staff", role in User.STAFF_ROLES)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Superuser must have an email")
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", User.ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_ADMIN = "admin"
    ROLE_ADVISOR = "advisor"
    ROLE_CUSTOMER = "customer"

    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_ADVISOR, "Advisor"),
        (ROLE_CUSTOMER, "Customer"),
    ]

    STAFF_ROLES = {ROLE_ADMIN, ROLE_ADVISOR}

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Canonical identity
    email = models.EmailField(unique=True)

    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.email:
            self.email = canonical_email(self.__class__.objects.normalize_email(self.email))

        if not self.email:
            raise ValidationError("User must have an email")

    @property
    def is_chat_staff(self) -> bool:
        return self.role in self.STAFF_ROLES

    def __str__(self):
        return f"{self.email} ({self.role})"
