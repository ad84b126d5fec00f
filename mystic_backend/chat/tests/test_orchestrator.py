# chat/tests/test_orchestrator.py

"""
LIVE CHAT ORCHESTRATOR TESTS

Time is simulated by patching django.utils.timezone.now.
"""

from __future__ import annotations

from datetime import timedelta
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone

from chat.models import ChatMessage, ChatSession
from chat.services import session_orchestrator, session_service
from chat.services.exceptions import (
    ChatValidationError,
    InvalidSessionTransitionError,
    SessionExpiredError,
    SessionNotActiveError,
    SessionNotFoundError,
)
from wallets.models import Wallet, WalletTransaction
from wallets.services import ledger
from wallets.services.exceptions import InsufficientCreditsError

CUSTOMER = "seeker@example.com"


def _at(moment):
    return mock.patch("django.utils.timezone.now", return_value=moment)


@override_settings(
    CHAT_RATE_PER_MINUTE_CENTS=299,
    CHAT_MIN_DURATION_MINUTES=5,
    CHAT_MAX_DURATION_MINUTES=60,
    CHAT_MESSAGE_MAX_LENGTH=2000,
)
class SessionOrchestratorTests(TestCase):
    """
    GUARANTEES:
    - requesting a session debits exactly its price, atomically
    - price is locked at creation
    - expiry is materialized on every read/write path
    - balance == sum(transactions) throughout
    """

    def _fund(self, cents):
        wallet = ledger.get_or_create_wallet(customer_id=CUSTOMER)
        if cents:
            ledger.apply_entry(wallet_id=wallet.pk, amount_cents=cents, description="seed")
        return wallet

    def _wallet(self):
        return Wallet.objects.get(customer_id=CUSTOMER)

    # =====================================================
    # END-TO-END SCENARIOS
    # =====================================================

    def test_scenario_a_empty_wallet_is_rejected(self):
        self._fund(0)

        with self.assertRaises(InsufficientCreditsError) as ctx:
            session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        self.assertEqual(ctx.exception.required_cents, 1495)
        self.assertEqual(ctx.exception.available_cents, 0)
        self.assertEqual(ChatSession.objects.count(), 0)
        self.assertEqual(self._wallet().balance_cents, 0)

    def test_scenarios_b_to_e_full_flow(self):
        self._fund(2000)

        # B: request
        session = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        self.assertEqual(session.status, ChatSession.STATUS_PENDING)
        self.assertEqual(session.credits_used_cents, 1495)
        self.assertIsNone(session.started_at)

        wallet = self._wallet()
        self.assertEqual(wallet.balance_cents, 505)
        debits = WalletTransaction.objects.filter(wallet=wallet, type=WalletTransaction.TYPE_DEBIT)
        self.assertEqual(list(debits.values_list("amount_cents", flat=True)), [-1495])
        self.assertTrue(ledger.verify_ledger(wallet))

        announcement = ChatMessage.objects.get(session=session)
        self.assertEqual(announcement.sender_role, ChatMessage.SENDER_SYSTEM)

        # C: accept
        t0 = timezone.now()
        with _at(t0):
            session = session_orchestrator.accept_session(session_id=session.pk, accepted_by="admin@example.com")

        self.assertEqual(session.status, ChatSession.STATUS_ACTIVE)
        self.assertEqual(session.started_at, t0)

        greeting = ChatMessage.objects.filter(session=session).order_by("-id").first()
        self.assertEqual(greeting.sender_role, ChatMessage.SENDER_ADVISOR)
        self.assertGreater(greeting.pk, announcement.pk)

        # still active just before the boundary, messages flow
        with _at(t0 + timedelta(seconds=200)):
            session_orchestrator.post_message(session_id=session.pk, sender_role="customer", content="Hi!")
            self.assertEqual(
                session_orchestrator.get_session_view(session_id=session.pk).status,
                ChatSession.STATUS_ACTIVE,
            )

        # D: 5 minutes + 1 second later, a plain read reports ended
        later = t0 + timedelta(seconds=301)
        with _at(later):
            view = session_orchestrator.get_session_view(session_id=session.pk)

        self.assertEqual(view.status, ChatSession.STATUS_ENDED)
        self.assertEqual(view.ended_at, later)
        self.assertEqual(view.end_reason, ChatSession.END_REASON_EXPIRED)

        # E: posting now fails with a specific, non-generic error
        with _at(later + timedelta(seconds=5)):
            with self.assertRaises(SessionExpiredError):
                session_orchestrator.post_message(session_id=session.pk, sender_role="customer", content="Still there?")

        # ended_at never moves once set
        self.assertEqual(ChatSession.objects.get(pk=session.pk).ended_at, later)
        self.assertTrue(ledger.verify_ledger(self._wallet()))

    def test_post_materializes_expiry_in_the_same_call(self):
        self._fund(2000)
        session = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        t0 = timezone.now()
        with _at(t0):
            session_orchestrator.accept_session(session_id=session.pk)

        with _at(t0 + timedelta(minutes=6)):
            with self.assertRaises(SessionExpiredError):
                session_orchestrator.post_message(session_id=session.pk, sender_role="advisor", content="late")

        stored = ChatSession.objects.get(pk=session.pk)
        self.assertEqual(stored.status, ChatSession.STATUS_ENDED)
        self.assertIsNotNone(stored.ended_at)

    # =====================================================
    # REQUEST RULES
    # =====================================================

    def test_duration_out_of_range_debits_nothing(self):
        self._fund(50_000)

        with self.assertRaises(ChatValidationError):
            session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=61)

        self.assertEqual(self._wallet().balance_cents, 50_000)
        self.assertEqual(ChatSession.objects.count(), 0)

    def test_failure_after_debit_rolls_everything_back(self):
        self._fund(2000)

        with mock.patch.object(session_service, "create_session", side_effect=RuntimeError("storage down")):
            with self.assertRaises(RuntimeError):
                session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        wallet = self._wallet()
        self.assertEqual(wallet.balance_cents, 2000)
        self.assertEqual(wallet.transactions.count(), 1)
        self.assertTrue(ledger.verify_ledger(wallet))

    def test_price_is_locked_at_creation(self):
        self._fund(5000)
        session = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        with override_settings(CHAT_RATE_PER_MINUTE_CENTS=999):
            view = session_orchestrator.get_session_view(session_id=session.pk)

        self.assertEqual(view.credits_used_cents, 1495)

        session.credits_used_cents = 4995
        with self.assertRaises(ValueError):
            session.save()

    # =====================================================
    # TRANSITIONS
    # =====================================================

    def test_accept_only_from_pending(self):
        self._fund(5000)
        session = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)
        session_orchestrator.accept_session(session_id=session.pk)

        with self.assertRaises(InvalidSessionTransitionError):
            session_orchestrator.accept_session(session_id=session.pk)

        session_orchestrator.end_session(session_id=session.pk)

        with self.assertRaises(InvalidSessionTransitionError):
            session_orchestrator.accept_session(session_id=session.pk)

    def test_end_is_idempotent_and_keeps_ended_at(self):
        self._fund(5000)
        session = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        t0 = timezone.now()
        with _at(t0):
            ended = session_orchestrator.end_session(session_id=session.pk, ended_by="admin@example.com")

        self.assertEqual(ended.status, ChatSession.STATUS_ENDED)
        self.assertIsNone(ended.started_at)
        self.assertEqual(ended.end_reason, ChatSession.END_REASON_ADMIN)

        with _at(t0 + timedelta(minutes=3)):
            again = session_orchestrator.end_session(session_id=session.pk)

        self.assertEqual(again.ended_at, t0)
        self.assertEqual(again.ended_by, "admin@example.com")

    def test_end_on_overdue_active_session_records_expiry(self):
        self._fund(2000)
        session = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        t0 = timezone.now()
        with _at(t0):
            session_orchestrator.accept_session(session_id=session.pk)

        later = t0 + timedelta(minutes=30)
        with _at(later):
            ended = session_orchestrator.end_session(session_id=session.pk, ended_by="admin@example.com")

        self.assertEqual(ended.status, ChatSession.STATUS_ENDED)
        self.assertEqual(ended.end_reason, ChatSession.END_REASON_EXPIRED)
        self.assertEqual(ended.ended_by, "")
        self.assertEqual(ChatSession.objects.get(pk=session.pk).ended_at, later)

        with _at(later + timedelta(minutes=1)):
            with self.assertRaises(SessionExpiredError):
                session_orchestrator.post_message(session_id=session.pk, sender_role="customer", content="still there?")

    def test_post_rechecks_expiry_under_the_row_lock(self):
        self._fund(2000)
        session = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        t0 = timezone.now()
        with _at(t0):
            session_orchestrator.accept_session(session_id=session.pk)
        messages_before = ChatMessage.objects.filter(session_id=session.pk).count()

        # The unlocked check still sees the session as live; the locked one must not.
        stale_view = mock.patch.object(session_service, "materialize_expiry", side_effect=lambda s, now=None: s)
        with _at(t0 + timedelta(minutes=5)), stale_view:
            with self.assertRaises(SessionExpiredError):
                session_orchestrator.post_message(session_id=session.pk, sender_role="customer", content="just in time?")

        stored = ChatSession.objects.get(pk=session.pk)
        self.assertEqual(stored.status, ChatSession.STATUS_ENDED)
        self.assertEqual(stored.end_reason, ChatSession.END_REASON_EXPIRED)
        self.assertEqual(ChatMessage.objects.filter(session_id=session.pk).count(), messages_before)

    def test_customer_identity_is_case_insensitive(self):
        self._fund(2000)

        session = session_orchestrator.request_session(customer_id="  Seeker@Example.COM ", duration_minutes=5)

        self.assertEqual(session.customer_id, CUSTOMER)
        self.assertEqual(
            [s.pk for s in session_orchestrator.list_customer_sessions(customer_id="SEEKER@example.com")],
            [session.pk],
        )
        self.assertEqual(self._wallet().balance_cents, 505)

    def test_end_does_not_refund(self):
        self._fund(2000)
        session = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)
        session_orchestrator.accept_session(session_id=session.pk)
        session_orchestrator.end_session(session_id=session.pk)

        self.assertEqual(self._wallet().balance_cents, 505)

    def test_post_to_pending_or_admin_ended_session(self):
        self._fund(5000)
        session = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        with self.assertRaises(SessionNotActiveError) as ctx:
            session_orchestrator.post_message(session_id=session.pk, sender_role="customer", content="hello?")
        self.assertNotIsInstance(ctx.exception, SessionExpiredError)

        session_orchestrator.end_session(session_id=session.pk)

        with self.assertRaises(SessionNotActiveError):
            session_orchestrator.post_message(session_id=session.pk, sender_role="customer", content="hello?")

    def test_unknown_session(self):
        with self.assertRaises(SessionNotFoundError):
            session_orchestrator.get_session_view(session_id=424242)

        with self.assertRaises(SessionNotFoundError):
            session_orchestrator.accept_session(session_id=424242)

    # =====================================================
    # LISTINGS + SWEEP
    # =====================================================

    def test_listings_materialize_expiry(self):
        self._fund(10_000)
        first = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)
        second = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=10)

        t0 = timezone.now()
        with _at(t0):
            session_orchestrator.accept_session(session_id=first.pk)
            session_orchestrator.accept_session(session_id=second.pk)

        with _at(t0 + timedelta(minutes=7)):
            active = session_orchestrator.list_sessions(status="active")
            ended = session_orchestrator.list_sessions(status="ended")
            mine = session_orchestrator.list_customer_sessions(customer_id=CUSTOMER)

        self.assertEqual([s.pk for s in active], [second.pk])
        self.assertEqual([s.pk for s in ended], [first.pk])
        self.assertEqual([s.pk for s in mine], [second.pk, first.pk])

        with self.assertRaises(ChatValidationError):
            session_orchestrator.list_sessions(status="bogus")

    def test_sweep_command_expires_untouched_sessions(self):
        self._fund(20_000)
        overdue = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)
        fresh = session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=30)

        t0 = timezone.now()
        with _at(t0):
            session_orchestrator.accept_session(session_id=overdue.pk)
            session_orchestrator.accept_session(session_id=fresh.pk)

        out = StringIO()
        with _at(t0 + timedelta(minutes=10)):
            call_command("expire_chat_sessions", stdout=out)

        self.assertIn("Expired 1", out.getvalue())
        self.assertEqual(ChatSession.objects.get(pk=overdue.pk).status, ChatSession.STATUS_ENDED)
        self.assertEqual(ChatSession.objects.get(pk=fresh.pk).status, ChatSession.STATUS_ACTIVE)

