# wallets/management/commands/verify_wallet_ledgers.py

from __future__ import annotations

from django.core.management.base import BaseCommand

from wallets.models import Wallet
from wallets.services.ledger import ledger_total, normalize_customer_id
from wallets.services.exceptions import WalletValidationError


class Command(BaseCommand):
    help = "Verify every wallet balance equals the sum of its transactions."

    def add_arguments(self, parser):
        parser.add_argument(
            "--customer",
            dest="customer_id",
            help="Only check this customer's wallet (email).",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any mismatch is found.",
        )

    def handle(self, *args, **options):
        strict = bool(options.get("strict"))
        wallets = Wallet.objects.all().order_by("id")

        if options.get("customer_id"):
            try:
                customer_id = normalize_customer_id(options["customer_id"])
            except WalletValidationError as exc:
                self.stderr.write(self.style.ERROR(str(exc)))
                return self._exit(strict)
            wallets = wallets.filter(customer_id=customer_id)

        self.stdout.write(self.style.MIGRATE_HEADING("Wallet ledger verification"))

        checked = 0
        mismatches = []

        for wallet in wallets.iterator():
            checked += 1
            total = ledger_total(wallet)
            if total != wallet.balance_cents:
                mismatches.append((wallet, total))

        self.stdout.write(f"Wallets checked: {checked}")

        if mismatches:
            self.stderr.write(self.style.ERROR(f"[FAIL] Balance/ledger mismatches: {len(mismatches)}"))
            for wallet, total in mismatches[:20]:
                self.stderr.write(
                    f"  wallet_id={wallet.pk} customer={wallet.customer_id} "
                    f"balance={wallet.balance_cents} ledger={total}"
                )
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Every balance matches its ledger"))

        return self._exit(strict and bool(mismatches))

    def _exit(self, fail: bool):
        if fail:
            raise SystemExit(1)
        return None
