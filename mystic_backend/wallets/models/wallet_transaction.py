# wallets/models/wallet_transaction.py

"""
WALLET TRANSACTION (IMMUTABLE)

Purpose:
- Append-only explanation of every wallet balance change.
- Signed amount: positive = credit, negative = debit.
- Created once; never updated; never deleted.
"""

from django.db import models
from django.utils import timezone

from .wallet import Wallet


class WalletTransaction(models.Model):
    TYPE_CREDIT = "credit"
    TYPE_DEBIT = "debit"

    TYPE_CHOICES = [
        (TYPE_CREDIT, "Credit"),
        (TYPE_DEBIT, "Debit"),
    ]

    wallet = models.ForeignKey(
        Wallet,
        on_delete=models.PROTECT,
        related_name="transactions",
    )

    amount_cents = models.BigIntegerField(
        help_text="Signed amount in cents (positive = credit, negative = debit).",
    )

    type = models.CharField(max_length=16, choices=TYPE_CHOICES)

    description = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["wallet", "created_at"], name="wallets_tx_wallet_created_idx"),
        ]

    def save(self, *args, **kwargs):
        # Allow creation, block updates
        if not self._state.adding:
            raise RuntimeError("WalletTransaction records are immutable")

        if self.type == self.TYPE_CREDIT and self.amount_cents <= 0:
            raise ValueError("Credit transactions must carry a positive amount.")
        if self.type == self.TYPE_DEBIT and self.amount_cents >= 0:
            raise ValueError("Debit transactions must carry a negative amount.")

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("WalletTransaction records cannot be deleted")

    def __str__(self):
        return f"{self.type} {self.amount_cents} | wallet {self.wallet_id}"
