# wallets/serializers/wallet.py

from rest_framework import serializers

from wallets.models import Wallet, WalletTransaction


class WalletTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = WalletTransaction
        fields = [
            "id",
            "amount_cents",
            "type",
            "description",
            "created_at",
        ]
        read_only_fields = fields


class WalletSerializer(serializers.ModelSerializer):
    """
    Wallet read model (balance only).
    """

    class Meta:
        model = Wallet
        fields = [
            "id",
            "customer_id",
            "balance_cents",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AccountSummarySerializer(serializers.Serializer):
    """
    Wallet + newest-first history, as returned by get_account_summary().
    """

    wallet = WalletSerializer(read_only=True)
    transactions = WalletTransactionSerializer(many=True, read_only=True)


class AddCreditsSerializer(serializers.Serializer):
    """
    Customer top-up command.
    Package membership is enforced by the ledger service.
    """

    amount_cents = serializers.IntegerField()


class GrantCreditsSerializer(serializers.Serializer):
    customer_id = serializers.EmailField()
    amount_cents = serializers.IntegerField(min_value=1)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
