# wallets/services/ledger.py

"""
WALLET LEDGER SERVICE (AUTHORITATIVE)

Purpose:
- Own every change to Wallet.balance_cents.
- Append one immutable WalletTransaction per change, so that at all times:
      wallet.balance_cents == sum(transactions.amount_cents)

Primitives:
- adjust_balance():      raw signed balance change (no non-negativity check)
- record_transaction():  raw append to the log

Production paths never call the primitives alone; they go through:
- apply_entry():          adjust + record in one atomic block
- debit_if_sufficient():  conditional UPDATE (balance >= cost) + record

RACE RULE:
- A check-then-act read of the balance is NOT a guarantee. The only debit
  guarantee is the single conditional UPDATE; its affected-row count decides.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone

from users.identity import MAX_IDENTITY_LENGTH, canonical_email
from wallets.models import Wallet, WalletTransaction
from wallets.services.exceptions import (
    InsufficientCreditsError,
    WalletNotFoundError,
    WalletValidationError,
)

logger = logging.getLogger(__name__)

ENTRY_TYPES = {WalletTransaction.TYPE_CREDIT, WalletTransaction.TYPE_DEBIT}


# ============================================================
# INPUT NORMALIZERS
# ============================================================

def normalize_customer_id(customer_id) -> str:
    value = canonical_email(customer_id)
    if not value:
        raise WalletValidationError("A customer identity is required.")
    if len(value) > MAX_IDENTITY_LENGTH:
        raise WalletValidationError("Customer identity is too long.")
    return value


def _to_int_cents(value, *, field: str = "amount_cents") -> int:
    """
    Money normalizer.
    HARD RULE: money is integer cents in this system.
    """
    if isinstance(value, bool):
        raise WalletValidationError(f"{field} must be a whole number of cents")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.lstrip("-").isdigit():
            return int(s)

    raise WalletValidationError(f"{field} must be a whole number of cents")


def _entry_type_for(amount_cents: int) -> str:
    if amount_cents > 0:
        return WalletTransaction.TYPE_CREDIT
    if amount_cents < 0:
        return WalletTransaction.TYPE_DEBIT
    raise WalletValidationError("amount_cents must not be zero")


# ============================================================
# LOOKUPS
# ============================================================

def get_or_create_wallet(*, customer_id) -> Wallet:
    """
    Idempotent: returns the existing wallet or creates one with balance 0.
    """
    wallet, created = Wallet.objects.get_or_create(
        customer_id=normalize_customer_id(customer_id),
    )
    if created:
        logger.info(
            "Wallet created",
            extra={"wallet_id": wallet.pk, "customer_id": wallet.customer_id},
        )
    return wallet


def get_wallet(*, wallet_id) -> Wallet:
    wallet = Wallet.objects.filter(pk=wallet_id).first()
    if wallet is None:
        raise WalletNotFoundError(f"Wallet {wallet_id} not found")
    return wallet


def get_wallet_for_customer(*, customer_id) -> Wallet:
    customer_id = normalize_customer_id(customer_id)
    wallet = Wallet.objects.filter(customer_id=customer_id).first()
    if wallet is None:
        raise WalletNotFoundError(f"No wallet for customer '{customer_id}'")
    return wallet


def list_transactions(*, wallet_id) -> list[WalletTransaction]:
    """
    Transactions for a wallet, most recent first.
    """
    get_wallet(wallet_id=wallet_id)
    return list(
        WalletTransaction.objects.filter(wallet_id=wallet_id).order_by("-created_at", "-id")
    )


# ============================================================
# PRIMITIVES
# ============================================================

def adjust_balance(*, wallet_id, amount_cents) -> Wallet:
    """
    Add a signed amount to the balance (atomic F() expression).

    NOTE:
    Does NOT enforce non-negativity. Debits that must not overdraw go
    through debit_if_sufficient().
    """
    amount_cents = _to_int_cents(amount_cents)

    updated = Wallet.objects.filter(pk=wallet_id).update(
        balance_cents=F("balance_cents") + amount_cents,
        updated_at=timezone.now(),
    )
    if not updated:
        raise WalletNotFoundError(f"Wallet {wallet_id} not found")

    return Wallet.objects.get(pk=wallet_id)


def record_transaction(*, wallet_id, amount_cents, entry_type: str, description: str = "") -> WalletTransaction:
    """
    Append an immutable log entry. Must be paired with adjust_balance()
    for the same amount (see apply_entry()).
    """
    amount_cents = _to_int_cents(amount_cents)

    if entry_type not in ENTRY_TYPES:
        raise WalletValidationError(f"Invalid transaction type: {entry_type}")
    if entry_type != _entry_type_for(amount_cents):
        raise WalletValidationError(
            f"Transaction type '{entry_type}' does not match amount sign ({amount_cents})"
        )

    wallet = get_wallet(wallet_id=wallet_id)

    return WalletTransaction.objects.create(
        wallet=wallet,
        amount_cents=amount_cents,
        type=entry_type,
        description=(description or "").strip()[:255],
        created_at=timezone.now(),
    )


# ============================================================
# LEDGER ENTRIES (BALANCE + LOG TOGETHER)
# ============================================================

@transaction.atomic
def apply_entry(*, wallet_id, amount_cents, description: str = "") -> tuple[Wallet, WalletTransaction]:
    """
    Move money and explain it, atomically.
    Type is derived from the sign (credit > 0, debit < 0).
    """
    amount_cents = _to_int_cents(amount_cents)
    entry_type = _entry_type_for(amount_cents)

    wallet = adjust_balance(wallet_id=wallet_id, amount_cents=amount_cents)
    tx = record_transaction(
        wallet_id=wallet_id,
        amount_cents=amount_cents,
        entry_type=entry_type,
        description=description,
    )

    logger.info(
        "Wallet entry applied",
        extra={
            "wallet_id": wallet.pk,
            "amount_cents": amount_cents,
            "balance_cents": wallet.balance_cents,
        },
    )
    return wallet, tx


@transaction.atomic
def debit_if_sufficient(*, wallet_id, amount_cents, description: str = "") -> tuple[Wallet, WalletTransaction]:
    """
    Customer-initiated debit. Never overdraws.

    Single conditional UPDATE:
        UPDATE wallet SET balance = balance - :cost
        WHERE id = :id AND balance >= :cost
    Zero affected rows -> InsufficientCreditsError (or WalletNotFoundError).
    """
    amount_cents = _to_int_cents(amount_cents)
    if amount_cents <= 0:
        raise WalletValidationError("Debit amount must be positive")

    updated = Wallet.objects.filter(
        pk=wallet_id,
        balance_cents__gte=amount_cents,
    ).update(
        balance_cents=F("balance_cents") - amount_cents,
        updated_at=timezone.now(),
    )

    if not updated:
        wallet = get_wallet(wallet_id=wallet_id)
        raise InsufficientCreditsError(
            required_cents=amount_cents,
            available_cents=wallet.balance_cents,
        )

    tx = record_transaction(
        wallet_id=wallet_id,
        amount_cents=-amount_cents,
        entry_type=WalletTransaction.TYPE_DEBIT,
        description=description,
    )
    wallet = Wallet.objects.get(pk=wallet_id)

    logger.info(
        "Wallet debited",
        extra={
            "wallet_id": wallet.pk,
            "amount_cents": -amount_cents,
            "balance_cents": wallet.balance_cents,
        },
    )
    return wallet, tx


# ============================================================
# USE CASES
# ============================================================

def allowed_credit_packages() -> list[int]:
    return sorted(int(v) for v in getattr(settings, "WALLET_CREDIT_PACKAGES", []))


def purchase_credits(*, customer_id, amount_cents) -> tuple[Wallet, WalletTransaction]:
    """
    Customer top-up with one of the configured credit packages.

    Payment capture belongs to the payment collaborator; by the time this
    runs the purchase has been reported as paid.
    """
    amount_cents = _to_int_cents(amount_cents)
    packages = allowed_credit_packages()
    if amount_cents not in packages:
        raise WalletValidationError(
            f"Invalid credit package: {amount_cents}. Allowed: {packages}"
        )

    with transaction.atomic():
        wallet = get_or_create_wallet(customer_id=customer_id)
        return apply_entry(
            wallet_id=wallet.pk,
            amount_cents=amount_cents,
            description="Added credits",
        )


def grant_credits(*, customer_id, amount_cents, description: str = "") -> tuple[Wallet, WalletTransaction]:
    """
    Administrative credit grant (positive amounts only).
    """
    amount_cents = _to_int_cents(amount_cents)
    if amount_cents <= 0:
        raise WalletValidationError("Granted amount must be positive")

    with transaction.atomic():
        wallet = get_or_create_wallet(customer_id=customer_id)
        return apply_entry(
            wallet_id=wallet.pk,
            amount_cents=amount_cents,
            description=(description or "").strip() or "Credits granted by admin",
        )


def get_account_summary(*, customer_id) -> dict:
    """
    Wallet + transaction history (most recent first) for an account page.
    """
    wallet = get_or_create_wallet(customer_id=customer_id)
    return {
        "wallet": wallet,
        "transactions": list_transactions(wallet_id=wallet.pk),
    }


# ============================================================
# LEDGER INTEGRITY
# ============================================================

def ledger_total(wallet: Wallet) -> int:
    total = WalletTransaction.objects.filter(wallet=wallet).aggregate(total=Sum("amount_cents")).get("total")
    return int(total or 0)


def verify_ledger(wallet: Wallet) -> bool:
    wallet.refresh_from_db(fields=["balance_cents"])
    return ledger_total(wallet) == wallet.balance_cents
