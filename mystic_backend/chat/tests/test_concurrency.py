# chat/tests/test_concurrency.py

"""
NO-OVERDRAFT UNDER CONTENTION

Balance exactly covers one 5-minute session; N requests race.
Exactly one may win, the rest get InsufficientCreditsError.
"""

from __future__ import annotations

import threading
from unittest import mock

from django.db import connection
from django.test import TestCase, TransactionTestCase, override_settings, skipUnlessDBFeature

from chat.models import ChatSession
from chat.services import session_orchestrator
from wallets.models import Wallet
from wallets.services import ledger
from wallets.services.exceptions import InsufficientCreditsError

CUSTOMER = "racer@example.com"
ATTEMPTS = 5

CHAT_SETTINGS = {
    "CHAT_RATE_PER_MINUTE_CENTS": 299,
    "CHAT_MIN_DURATION_MINUTES": 5,
    "CHAT_MAX_DURATION_MINUTES": 60,
}


@override_settings(**CHAT_SETTINGS)
class StaleBalanceTests(TestCase):
    def setUp(self):
        wallet = ledger.get_or_create_wallet(customer_id=CUSTOMER)
        ledger.apply_entry(wallet_id=wallet.pk, amount_cents=1495)

    def test_sequential_requests_only_one_succeeds(self):
        outcomes = []
        for _ in range(ATTEMPTS):
            try:
                session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)
                outcomes.append("ok")
            except InsufficientCreditsError:
                outcomes.append("insufficient")

        self.assertEqual(outcomes.count("ok"), 1)
        self.assertEqual(outcomes.count("insufficient"), ATTEMPTS - 1)

        wallet = Wallet.objects.get(customer_id=CUSTOMER)
        self.assertEqual(wallet.balance_cents, 0)
        self.assertTrue(ledger.verify_ledger(wallet))

    def test_stale_precheck_cannot_overdraw(self):
        """
        Simulate the interleaving where the pre-check read happens before a
        competing debit commits: the pre-check passes, the conditional
        debit must still refuse.
        """
        stale = Wallet.objects.get(customer_id=CUSTOMER)
        session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        with mock.patch.object(session_orchestrator, "get_or_create_wallet", return_value=stale):
            with self.assertRaises(InsufficientCreditsError) as ctx:
                session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)

        self.assertEqual(ctx.exception.available_cents, 0)
        self.assertEqual(ChatSession.objects.count(), 1)
        self.assertEqual(Wallet.objects.get(customer_id=CUSTOMER).balance_cents, 0)


@override_settings(**CHAT_SETTINGS)
@skipUnlessDBFeature("has_select_for_update")
class ConcurrentRequestTests(TransactionTestCase):
    """
    Real threads against a database with row locking (PostgreSQL).
    """

    def setUp(self):
        wallet = ledger.get_or_create_wallet(customer_id=CUSTOMER)
        ledger.apply_entry(wallet_id=wallet.pk, amount_cents=1495)

    def test_parallel_requests_exactly_one_wins(self):
        barrier = threading.Barrier(ATTEMPTS)
        results = []
        lock = threading.Lock()

        def attempt():
            outcome = "error"
            try:
                barrier.wait()
                session_orchestrator.request_session(customer_id=CUSTOMER, duration_minutes=5)
                outcome = "ok"
            except InsufficientCreditsError:
                outcome = "insufficient"
            finally:
                connection.close()
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=attempt) for _ in range(ATTEMPTS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(results.count("ok"), 1)
        self.assertEqual(results.count("insufficient"), ATTEMPTS - 1)

        wallet = Wallet.objects.get(customer_id=CUSTOMER)
        self.assertEqual(wallet.balance_cents, 0)
        self.assertGreaterEqual(wallet.balance_cents, 0)
        self.assertTrue(ledger.verify_ledger(wallet))
        self.assertEqual(ChatSession.objects.count(), 1)
