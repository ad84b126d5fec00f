# wallets/models/__init__.py

"""
WALLETS MODELS PACKAGE EXPORTS
"""

from .wallet import Wallet
from .wallet_transaction import WalletTransaction

__all__ = [
    "Wallet",
    "WalletTransaction",
]
