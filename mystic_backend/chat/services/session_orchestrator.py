"""
======================================================
PATH: chat/services/session_orchestrator.py
======================================================
LIVE CHAT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Tie together the wallet ledger, the session state machine and the
  message log. Each use case is atomic from the caller's perspective.

Use cases:
- request_session:  price -> debit wallet -> create pending -> system message
- accept_session:   pending -> active -> advisor greeting
- post_message:     materialize expiry -> must be active -> append
- end_session:      explicit admin termination (no refund of unused time)
- get_session_view / list_messages / list_*_sessions: materialize, then read

Identity:
- Callers pass the acting identity explicitly (customer_id, accepted_by,
  ended_by, sender_role). Authorization is decided by the API layer.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from chat.models import ChatMessage, ChatSession
from chat.services import message_log, session_service
from chat.services.exceptions import (
    ChatValidationError,
    SessionExpiredError,
    SessionNotActiveError,
)
from chat.services.session_lifecycle import session_cost_cents, validate_duration
from wallets.services.exceptions import InsufficientCreditsError
from wallets.services.ledger import debit_if_sufficient, get_or_create_wallet, normalize_customer_id

logger = logging.getLogger(__name__)

REQUEST_ANNOUNCEMENT = "Chat session requested ({minutes} minutes). Waiting for an advisor to join..."
ADVISOR_GREETING = "Hello! I'm here and ready to begin your reading. What would you like to explore today?"


# ============================================================
# REQUEST
# ============================================================

@transaction.atomic
def request_session(*, customer_id, duration_minutes) -> ChatSession:
    minutes = validate_duration(duration_minutes)
    cost = session_cost_cents(minutes)

    wallet = get_or_create_wallet(customer_id=customer_id)

    # Early, friendly rejection. The conditional debit below is the guarantee.
    if wallet.balance_cents < cost:
        raise InsufficientCreditsError(
            required_cents=cost,
            available_cents=wallet.balance_cents,
        )

    debit_if_sufficient(
        wallet_id=wallet.pk,
        amount_cents=cost,
        description=f"Live chat session ({minutes} minutes)",
    )

    session = session_service.create_session(
        customer_id=wallet.customer_id,
        duration_minutes=minutes,
        credits_used_cents=cost,
    )

    message_log.append_message(
        session_id=session.pk,
        sender_role=ChatMessage.SENDER_SYSTEM,
        content=REQUEST_ANNOUNCEMENT.format(minutes=minutes),
    )

    logger.info(
        "Chat session requested",
        extra={
            "session_id": session.pk,
            "customer_id": session.customer_id,
            "credits_used_cents": cost,
        },
    )
    return session


# ============================================================
# ACCEPT / END
# ============================================================

@transaction.atomic
def accept_session(*, session_id, accepted_by: str = "") -> ChatSession:
    session = session_service.accept_session(session_id=session_id, accepted_by=accepted_by)

    message_log.append_message(
        session_id=session.pk,
        sender_role=ChatMessage.SENDER_ADVISOR,
        content=ADVISOR_GREETING,
    )
    return session


def end_session(*, session_id, ended_by: str = "") -> ChatSession:
    """
    Explicit termination regardless of elapsed time. Unused time is forfeited.
    """
    return session_service.end_session(
        session_id=session_id,
        ended_by=ended_by,
        reason=ChatSession.END_REASON_ADMIN,
    )


# ============================================================
# MESSAGES
# ============================================================

def post_message(*, session_id, sender_role, content) -> ChatMessage:
    """
    Expiry is materialized (and committed) before the state check, so an
    overdue session stays ended even though this call fails.
    """
    session = session_service.get_session(session_id=session_id)
    session = session_service.materialize_expiry(session)
    _ensure_accepts_messages(session)

    with transaction.atomic():
        # Hold the row so a concurrent end cannot slip in before the append.
        session = ChatSession.objects.select_for_update().get(pk=session.pk)
        # Time may have run out since the unlocked check above.
        session = session_service.expire_locked_session(session, now=timezone.now())
        if _accepts_messages(session):
            return message_log.append_message(
                session_id=session.pk,
                sender_role=sender_role,
                content=content,
            )

    _ensure_accepts_messages(session)


def _accepts_messages(session: ChatSession) -> bool:
    return ChatSession.STATUS_ENUM[session.status]["accepts_messages"]


def _ensure_accepts_messages(session: ChatSession):
    if _accepts_messages(session):
        return
    if session.end_reason == ChatSession.END_REASON_EXPIRED:
        raise SessionExpiredError("This chat session has expired. Time's up!")
    raise SessionNotActiveError(
        f"Chat session {session.pk} is {session.status}; messages can only be sent while it is active"
    )


def list_messages(*, session_id, since_id=0) -> list[ChatMessage]:
    session_service.materialize_expiry(session_service.get_session(session_id=session_id))
    return message_log.list_messages_since(session_id=session_id, since_id=since_id)


# ============================================================
# READS
# ============================================================

def get_session_view(*, session_id) -> ChatSession:
    """
    The read path every poller uses: always reports a logically correct status.
    """
    session = session_service.get_session(session_id=session_id)
    return session_service.materialize_expiry(session)


def list_customer_sessions(*, customer_id) -> list[ChatSession]:
    customer_id = normalize_customer_id(customer_id)
    now = timezone.now()
    return [
        session_service.materialize_expiry(s, now=now)
        for s in ChatSession.objects.filter(customer_id=customer_id).order_by("-created_at", "-id")
    ]


def list_sessions(*, status=None) -> list[ChatSession]:
    """
    Admin console listing, newest first. Status is filtered AFTER expiry is
    materialized so an overdue session never shows up as active.
    """
    valid = {choice for choice, _ in ChatSession.STATUS_CHOICES}
    if status not in (None, "") and status not in valid:
        raise ChatValidationError(f"Invalid status filter: {status}")

    now = timezone.now()
    sessions = [
        session_service.materialize_expiry(s, now=now)
        for s in ChatSession.objects.all().order_by("-created_at", "-id")
    ]

    if status:
        sessions = [s for s in sessions if s.status == status]
    return sessions
