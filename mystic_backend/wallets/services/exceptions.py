# wallets/services/exceptions.py

"""
WALLET SERVICE ERRORS

Centralized domain errors for the wallet ledger.
All of these are expected, user-facing conditions (never logged as failures).
"""


class WalletServiceError(Exception):
    """Base exception for all wallet service failures."""

    code = "WALLET_ERROR"


class WalletValidationError(WalletServiceError):
    """Raised on malformed input (bad amount, bad identity, unknown package)."""

    code = "VALIDATION_ERROR"


class WalletNotFoundError(WalletServiceError):
    """Raised when a referenced wallet does not exist."""

    code = "NOT_FOUND"


class InsufficientCreditsError(WalletServiceError):
    """
    Raised when a debit would drive the balance below zero.
    Carries both amounts so callers can prompt a top-up.
    """

    code = "INSUFFICIENT_CREDITS"

    def __init__(self, *, required_cents: int, available_cents: int):
        self.required_cents = int(required_cents)
        self.available_cents = int(available_cents)
        super().__init__(
            f"Insufficient credits. Required: {self.required_cents}, "
            f"available: {self.available_cents}"
        )
