"""
======================================================
PATH: chat/services/session_service.py
======================================================
CHAT SESSION STATE MACHINE (PERSISTENCE)

Purpose:
- Create sessions and apply lifecycle transitions to stored rows.
- Materialize time-driven expiry.

Expiry strategy:
- Lazy: every read/write path calls materialize_expiry() before trusting
  `status`. This is authoritative.
- Sweep (optional): expire_overdue_sessions() runs the same transition for
  untouched rows (see `manage.py expire_chat_sessions`).

Concurrency:
- Every transition re-reads the row under select_for_update and re-validates,
  so two concurrent accepts (or accept vs. expiry) cannot both win.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from chat.models import ChatSession
from chat.services.exceptions import ChatValidationError, SessionNotFoundError
from chat.services.session_lifecycle import is_expired, validate_duration, validate_transition
from users.identity import MAX_IDENTITY_LENGTH, canonical_email
from wallets.services.ledger import normalize_customer_id

logger = logging.getLogger(__name__)


# ============================================================
# LOOKUPS
# ============================================================

def get_session(*, session_id) -> ChatSession:
    try:
        return ChatSession.objects.get(pk=int(session_id))
    except (TypeError, ValueError):
        raise SessionNotFoundError(f"Chat session {session_id} not found")
    except ChatSession.DoesNotExist:
        raise SessionNotFoundError(f"Chat session {session_id} not found")


def _lock_session(session_id) -> ChatSession:
    try:
        return ChatSession.objects.select_for_update().get(pk=session_id)
    except ChatSession.DoesNotExist:
        raise SessionNotFoundError(f"Chat session {session_id} not found")


# ============================================================
# TRANSITIONS
# ============================================================

def create_session(*, customer_id, duration_minutes, credits_used_cents) -> ChatSession:
    minutes = validate_duration(duration_minutes)

    if isinstance(credits_used_cents, bool) or not isinstance(credits_used_cents, int) or credits_used_cents < 0:
        raise ChatValidationError("credits_used_cents must be a non-negative whole number of cents")

    return ChatSession.objects.create(
        customer_id=normalize_customer_id(customer_id),
        status=ChatSession.STATUS_PENDING,
        duration_minutes=minutes,
        credits_used_cents=credits_used_cents,
        created_at=timezone.now(),
    )


@transaction.atomic
def accept_session(*, session_id, accepted_by: str = "") -> ChatSession:
    """
    pending -> active, stamps started_at.
    """
    session = _lock_session(session_id)
    validate_transition(session=session, target_status=ChatSession.STATUS_ACTIVE)

    session.status = ChatSession.STATUS_ACTIVE
    session.started_at = timezone.now()
    session.accepted_by = canonical_email(accepted_by)[:MAX_IDENTITY_LENGTH]
    session.save(update_fields=["status", "started_at", "accepted_by"])

    logger.info(
        "Chat session accepted",
        extra={"session_id": session.pk, "accepted_by": session.accepted_by},
    )
    return session


@transaction.atomic
def end_session(*, session_id, ended_by: str = "", reason: str = ChatSession.END_REASON_ADMIN) -> ChatSession:
    """
    Explicit termination from pending or active.
    Ending an already ended session is a no-op (ended_at never moves).
    An active session whose time already ran out is recorded as expired.
    """
    now = timezone.now()
    session = _lock_session(session_id)

    if session.status == ChatSession.STATUS_ENDED:
        return session

    if is_expired(session, now=now):
        return expire_locked_session(session, now=now)

    validate_transition(session=session, target_status=ChatSession.STATUS_ENDED)

    session.status = ChatSession.STATUS_ENDED
    session.ended_at = now
    session.ended_by = canonical_email(ended_by)[:MAX_IDENTITY_LENGTH]
    session.end_reason = reason
    session.save(update_fields=["status", "ended_at", "ended_by", "end_reason"])

    logger.info(
        "Chat session ended",
        extra={"session_id": session.pk, "ended_by": session.ended_by, "reason": reason},
    )
    return session


def expire_locked_session(session: ChatSession, *, now) -> ChatSession:
    """
    active -> ended (expired) on a row the caller holds under select_for_update.
    No-op unless the session's time has elapsed at `now`.
    """
    if not is_expired(session, now=now):
        return session

    validate_transition(session=session, target_status=ChatSession.STATUS_ENDED)
    session.status = ChatSession.STATUS_ENDED
    session.ended_at = now
    session.end_reason = ChatSession.END_REASON_EXPIRED
    session.save(update_fields=["status", "ended_at", "end_reason"])

    logger.info(
        "Chat session expired",
        extra={"session_id": session.pk, "duration_minutes": session.duration_minutes},
    )
    return session


def materialize_expiry(session: ChatSession, *, now=None) -> ChatSession:
    """
    If the session is active and its time has elapsed, record `ended`.
    Otherwise return it unchanged. Idempotent.
    """
    now = now or timezone.now()

    # Cheap unlocked check first; pollers hit this on every request.
    if not is_expired(session, now=now):
        return session

    with transaction.atomic():
        return expire_locked_session(_lock_session(session.pk), now=now)


def expire_overdue_sessions(*, now=None) -> int:
    """
    Sweep: close every active session whose time has elapsed.
    Returns how many sessions were ended.
    """
    now = now or timezone.now()
    ended = 0

    candidates = ChatSession.objects.filter(
        status=ChatSession.STATUS_ACTIVE,
        started_at__isnull=False,
    ).order_by("id")

    for session in candidates.iterator():
        if not is_expired(session, now=now):
            continue
        if materialize_expiry(session, now=now).status == ChatSession.STATUS_ENDED:
            ended += 1

    if ended:
        logger.info("Expired overdue chat sessions", extra={"count": ended})
    return ended
