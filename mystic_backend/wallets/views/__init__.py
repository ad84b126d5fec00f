from .wallet import (
    AddCreditsView,
    AdminGrantCreditsView,
    AdminWalletDetailView,
    WalletSummaryView,
)

__all__ = [
    "AddCreditsView",
    "AdminGrantCreditsView",
    "AdminWalletDetailView",
    "WalletSummaryView",
]
