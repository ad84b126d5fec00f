# wallets/models/wallet.py

from django.db import models


class Wallet(models.Model):
    """
    Prepaid credit balance for one customer identity.

    GUARANTEES:
    - balance_cents only moves through the ledger service, which writes a
      WalletTransaction for every change (balance == sum of transactions)
    - Customer-initiated debits never drive the balance negative
      (conditional UPDATE in wallets.services.ledger.debit_if_sufficient)
    - Never deleted
    """

    customer_id = models.CharField(
        max_length=254,
        unique=True,
        help_text="Owning customer identity (normalized email address).",
    )

    balance_cents = models.BigIntegerField(
        default=0,
        help_text="Current credit balance in integer cents.",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Wallet.objects.filter(pk=self.pk).values("balance_cents", "customer_id").first()
            if previous is not None:
                if previous["balance_cents"] != self.balance_cents:
                    raise ValueError(
                        "Wallet balance can only change through the ledger service."
                    )
                if previous["customer_id"] != self.customer_id:
                    raise ValueError("Wallet owner cannot be changed.")

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("Wallets cannot be deleted")

    def __str__(self):
        return f"{self.customer_id} | {self.balance_cents}"
