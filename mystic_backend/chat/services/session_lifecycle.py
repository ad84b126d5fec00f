"""
CHAT SESSION LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for ChatSession entities:

    pending -> active -> ended
    pending -> ended            (admin ends before anyone accepted)

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Time is passed in, never read here
"""

from __future__ import annotations

from datetime import timedelta

from django.conf import settings

from chat.models import ChatSession
from chat.services.exceptions import ChatValidationError, InvalidSessionTransitionError

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {status for status, meta in ChatSession.STATUS_ENUM.items() if meta["terminal"]}

ALLOWED_TRANSITIONS = {
    ChatSession.STATUS_PENDING: {
        ChatSession.STATUS_ACTIVE,
        ChatSession.STATUS_ENDED,
    },
    ChatSession.STATUS_ACTIVE: {
        ChatSession.STATUS_ENDED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, session: ChatSession, target_status: str):
    if not can_transition(
        from_status=session.status,
        to_status=target_status,
    ):
        raise InvalidSessionTransitionError(
            f"Chat session {session.pk} cannot transition from "
            f"'{session.status}' to '{target_status}'"
        )


def duration_bounds() -> tuple[int, int]:
    return int(settings.CHAT_MIN_DURATION_MINUTES), int(settings.CHAT_MAX_DURATION_MINUTES)


def validate_duration(duration_minutes) -> int:
    if isinstance(duration_minutes, bool):
        raise ChatValidationError("duration_minutes must be a whole number of minutes")

    try:
        minutes = int(duration_minutes)
    except (TypeError, ValueError):
        raise ChatValidationError("duration_minutes must be a whole number of minutes")

    if isinstance(duration_minutes, float) and minutes != duration_minutes:
        raise ChatValidationError("duration_minutes must be a whole number of minutes")

    low, high = duration_bounds()
    if not low <= minutes <= high:
        raise ChatValidationError(f"Duration must be between {low} and {high} minutes")

    return minutes


def session_cost_cents(duration_minutes: int) -> int:
    """
    Price of a session at the current rate. Stored on the session at request
    time and never recomputed.
    """
    return int(settings.CHAT_RATE_PER_MINUTE_CENTS) * int(duration_minutes)


def is_expired(session: ChatSession, *, now) -> bool:
    """
    Logically expired: active and (now - started_at) >= duration.
    """
    if session.status != ChatSession.STATUS_ACTIVE or session.started_at is None:
        return False

    return now - session.started_at >= timedelta(minutes=session.duration_minutes)
