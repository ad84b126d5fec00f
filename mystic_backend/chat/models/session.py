# chat/models/session.py

from datetime import timedelta

from django.db import models
from django.utils import timezone


class ChatSession(models.Model):
    """
    A timed, prepaid live consultation.

    GUARANTEES:
    - credits_used_cents is the price debited at request time (never recomputed)
    - duration_minutes is fixed at creation
    - started_at is set iff the session has ever been active
    - ended_at is set iff the session is ended, and never changes afterwards
    - status only moves through chat.services.session_lifecycle
    """

    STATUS_PENDING = "pending"
    STATUS_ACTIVE = "active"
    STATUS_ENDED = "ended"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACTIVE, "Active"),
        (STATUS_ENDED, "Ended"),
    ]

    STATUS_ENUM = {
        STATUS_PENDING: {"label": "Waiting for an advisor", "terminal": False, "accepts_messages": False},
        STATUS_ACTIVE: {"label": "Active", "terminal": False, "accepts_messages": True},
        STATUS_ENDED: {"label": "Ended", "terminal": True, "accepts_messages": False},
    }

    END_REASON_EXPIRED = "expired"
    END_REASON_ADMIN = "admin"

    END_REASON_CHOICES = [
        (END_REASON_EXPIRED, "Time elapsed"),
        (END_REASON_ADMIN, "Ended by admin"),
    ]

    customer_id = models.CharField(
        max_length=254,
        db_index=True,
        help_text="Owning customer identity (normalized email address).",
    )

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )

    duration_minutes = models.PositiveSmallIntegerField()

    credits_used_cents = models.BigIntegerField(
        help_text="Amount debited from the wallet when the session was requested.",
    )

    started_at = models.DateTimeField(null=True, blank=True)
    ended_at = models.DateTimeField(null=True, blank=True)

    accepted_by = models.CharField(max_length=254, blank=True)
    ended_by = models.CharField(max_length=254, blank=True)
    end_reason = models.CharField(max_length=16, choices=END_REASON_CHOICES, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["customer_id", "created_at"], name="chat_session_customer_idx"),
        ]

    # --------------------------------------------------
    # IMMUTABILITY GUARD
    # --------------------------------------------------

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = (
                ChatSession.objects.filter(pk=self.pk)
                .values("customer_id", "duration_minutes", "credits_used_cents", "ended_at")
                .first()
            )
            if previous is not None:
                for field in ("customer_id", "duration_minutes", "credits_used_cents"):
                    if previous[field] != getattr(self, field):
                        raise ValueError(f"ChatSession.{field} cannot be changed after creation.")
                if previous["ended_at"] is not None and previous["ended_at"] != self.ended_at:
                    raise ValueError("ChatSession.ended_at cannot change once set.")

        super().save(*args, **kwargs)

    # --------------------------------------------------
    # TIME HELPERS
    # --------------------------------------------------

    @property
    def expires_at(self):
        if self.started_at is None:
            return None
        return self.started_at + timedelta(minutes=self.duration_minutes)

    def remaining_seconds(self, now=None) -> int | None:
        """
        Seconds left on an active session (0 once elapsed); None otherwise.
        Presentation only: the lifecycle decides expiry.
        """
        if self.status != self.STATUS_ACTIVE or self.expires_at is None:
            return None
        now = now or timezone.now()
        return max(0, int((self.expires_at - now).total_seconds()))

    def __str__(self):
        return f"Chat {self.pk} | {self.customer_id} | {self.status}"
