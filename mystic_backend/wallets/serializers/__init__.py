from .wallet import (
    AccountSummarySerializer,
    AddCreditsSerializer,
    GrantCreditsSerializer,
    WalletSerializer,
    WalletTransactionSerializer,
)

__all__ = [
    "AccountSummarySerializer",
    "AddCreditsSerializer",
    "GrantCreditsSerializer",
    "WalletSerializer",
    "WalletTransactionSerializer",
]
