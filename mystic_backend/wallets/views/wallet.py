# wallets/views/wallet.py

"""
WALLET API

Customer:
- GET  /api/wallet/               -> balance + history (wallet auto-created)
- POST /api/wallet/add-credits/   -> buy a credit package

Admin:
- POST /api/wallet/admin/grant/               -> grant credits
- GET  /api/wallet/admin/<customer_id>/       -> inspect any wallet
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import internal_error_response, service_error_response
from permissions.roles import CAP_WALLET_GRANT, CAP_WALLET_TOPUP, HasCapability, IsAdmin, IsCustomer
from wallets.serializers import (
    AccountSummarySerializer,
    AddCreditsSerializer,
    GrantCreditsSerializer,
    WalletSerializer,
    WalletTransactionSerializer,
)
from wallets.services.exceptions import WalletServiceError
from wallets.services.ledger import (
    get_account_summary,
    get_wallet_for_customer,
    grant_credits,
    list_transactions,
    purchase_credits,
)

logger = logging.getLogger(__name__)


class WalletSummaryView(APIView):
    """Customers only; staff accounts carry no wallet."""

    permission_classes = [IsAuthenticated, IsCustomer]

    @extend_schema(responses=AccountSummarySerializer)
    def get(self, request):
        try:
            summary = get_account_summary(customer_id=request.user.email)
        except WalletServiceError as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="wallet.summary")

        return Response(AccountSummarySerializer(summary).data, status=status.HTTP_200_OK)


class AddCreditsView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_WALLET_TOPUP

    @extend_schema(request=AddCreditsSerializer, responses=WalletSerializer)
    def post(self, request):
        serializer = AddCreditsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            wallet, tx = purchase_credits(
                customer_id=request.user.email,
                amount_cents=serializer.validated_data["amount_cents"],
            )
        except WalletServiceError as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="wallet.add_credits")

        return Response(
            {
                "wallet": WalletSerializer(wallet).data,
                "transaction": WalletTransactionSerializer(tx).data,
            },
            status=status.HTTP_201_CREATED,
        )


class AdminGrantCreditsView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_WALLET_GRANT

    @extend_schema(request=GrantCreditsSerializer, responses=WalletSerializer)
    def post(self, request):
        serializer = GrantCreditsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            wallet, tx = grant_credits(
                customer_id=data["customer_id"],
                amount_cents=data["amount_cents"],
                description=data.get("description", ""),
            )
        except WalletServiceError as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="wallet.grant")

        logger.info(
            "Credits granted",
            extra={
                "wallet_id": wallet.pk,
                "amount_cents": tx.amount_cents,
                "granted_by": str(request.user.pk),
            },
        )

        return Response(
            {
                "wallet": WalletSerializer(wallet).data,
                "transaction": WalletTransactionSerializer(tx).data,
            },
            status=status.HTTP_201_CREATED,
        )


class AdminWalletDetailView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @extend_schema(responses=AccountSummarySerializer)
    def get(self, request, customer_id: str):
        try:
            wallet = get_wallet_for_customer(customer_id=customer_id)
            transactions = list_transactions(wallet_id=wallet.pk)
        except WalletServiceError as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="wallet.admin_detail")

        data = AccountSummarySerializer({"wallet": wallet, "transactions": transactions}).data
        return Response(data, status=status.HTTP_200_OK)
