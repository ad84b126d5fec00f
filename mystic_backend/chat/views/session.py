# chat/views/session.py

"""
LIVE CHAT API

Customer side (/api/chat/sessions/):
- list/create own sessions
- retrieve + messages (owner or staff)

Staff console (/api/chat/admin/sessions/):
- list (admin/advisor), accept (admin/advisor), end (admin)

All domain errors leave as {"error": {"code", "message"}}.
"""

from __future__ import annotations

from django.conf import settings
from django.db import DatabaseError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.api_errors import error_response, internal_error_response, service_error_response
from chat.models import ChatMessage
from chat.serializers import (
    ChatMessageSerializer,
    ChatSessionSerializer,
    PostMessageSerializer,
    RequestSessionSerializer,
)
from chat.services import session_orchestrator
from chat.services.exceptions import ChatServiceError
from chat.services.session_service import get_session
from chat.views.throttles import ChatPollThrottle, ChatWriteThrottle
from permissions.roles import (
    CAP_CHAT_ACCEPT,
    CAP_CHAT_END,
    CAP_CHAT_MONITOR,
    CAP_CHAT_REQUEST,
    HasAnyCapability,
    HasCapability,
    is_staff_user,
)
from users.identity import canonical_email
from wallets.services.exceptions import WalletServiceError

SERVICE_ERRORS = (ChatServiceError, WalletServiceError)


def _identity(user) -> str:
    return canonical_email(getattr(user, "email", ""))


def _not_found(session_id):
    return error_response(
        code="NOT_FOUND",
        message=f"Chat session {session_id} not found",
        http_status=status.HTTP_404_NOT_FOUND,
    )


# ======================================================
# CUSTOMER + PARTICIPANT VIEWSET
# ======================================================

class ChatSessionViewSet(viewsets.ViewSet):
    """
    Sessions as seen by participants.

    - create/list: customers (CAP_CHAT_REQUEST)
    - retrieve/messages: the owning customer or any staff member
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"
    required_capability = None

    def get_permissions(self):
        if self.action in ("create", "list"):
            self.required_capability = CAP_CHAT_REQUEST
            return [IsAuthenticated(), HasCapability()]
        return [IsAuthenticated()]

    def get_throttles(self):
        if settings.TESTING:
            return []
        if self.action == "create" or self.request.method == "POST":
            return [ChatWriteThrottle()]
        return [ChatPollThrottle()]

    def _sender_role_for(self, request, session):
        """
        Owner posts as customer, staff post as advisor, everyone else is refused.
        """
        if session.customer_id == _identity(request.user):
            return ChatMessage.SENDER_CUSTOMER
        if is_staff_user(request.user):
            return ChatMessage.SENDER_ADVISOR
        return None

    def _load_participant_session(self, request, pk):
        """
        Returns (session, None) or (None, error_response).
        Non-participants get 404 so session ids cannot be enumerated.
        """
        try:
            session = get_session(session_id=pk)
        except ChatServiceError:
            return None, _not_found(pk)

        if self._sender_role_for(request, session) is None:
            return None, _not_found(pk)

        return session, None

    # --------------------------------------------------
    # LIST / CREATE (customer)
    # --------------------------------------------------

    @extend_schema(responses=ChatSessionSerializer(many=True))
    def list(self, request):
        try:
            sessions = session_orchestrator.list_customer_sessions(customer_id=_identity(request.user))
        except SERVICE_ERRORS as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="chat.list_customer_sessions")

        return Response(ChatSessionSerializer(sessions, many=True).data)

    @extend_schema(request=RequestSessionSerializer, responses=ChatSessionSerializer)
    def create(self, request):
        serializer = RequestSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            session = session_orchestrator.request_session(
                customer_id=_identity(request.user),
                duration_minutes=serializer.validated_data["duration_minutes"],
            )
        except SERVICE_ERRORS as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="chat.request_session")

        return Response(ChatSessionSerializer(session).data, status=status.HTTP_201_CREATED)

    # --------------------------------------------------
    # READ (participant)
    # --------------------------------------------------

    @extend_schema(responses=ChatSessionSerializer)
    def retrieve(self, request, pk=None):
        session, error = self._load_participant_session(request, pk)
        if error is not None:
            return error

        try:
            session = session_orchestrator.get_session_view(session_id=session.pk)
        except SERVICE_ERRORS as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="chat.get_session_view")

        return Response(ChatSessionSerializer(session).data)

    # --------------------------------------------------
    # MESSAGES (participant)
    # --------------------------------------------------

    @extend_schema(
        methods=["GET"],
        parameters=[OpenApiParameter("since_id", int, description="Return messages with id > since_id")],
        responses=ChatMessageSerializer(many=True),
    )
    @extend_schema(methods=["POST"], request=PostMessageSerializer, responses=ChatMessageSerializer)
    @action(detail=True, methods=["get", "post"], url_path="messages")
    def messages(self, request, pk=None):
        session, error = self._load_participant_session(request, pk)
        if error is not None:
            return error

        if request.method == "GET":
            try:
                messages = session_orchestrator.list_messages(
                    session_id=session.pk,
                    since_id=request.query_params.get("since_id", 0),
                )
            except SERVICE_ERRORS as exc:
                return service_error_response(exc)
            except DatabaseError as exc:
                return internal_error_response(exc, operation="chat.list_messages")

            return Response(ChatMessageSerializer(messages, many=True).data)

        serializer = PostMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            message = session_orchestrator.post_message(
                session_id=session.pk,
                sender_role=self._sender_role_for(request, session),
                content=serializer.validated_data["content"],
            )
        except SERVICE_ERRORS as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="chat.post_message")

        return Response(ChatMessageSerializer(message).data, status=status.HTTP_201_CREATED)


# ======================================================
# STAFF CONSOLE VIEWSET
# ======================================================

class AdminChatSessionViewSet(viewsets.ViewSet):
    """
    Live-session console.

    - list: admin/advisor (optionally ?status=pending|active|ended)
    - accept: admin/advisor
    - end: admin only
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"
    required_capability = None

    def get_permissions(self):
        if self.action == "accept":
            self.required_capability = CAP_CHAT_ACCEPT
            return [IsAuthenticated(), HasCapability()]

        if self.action == "end":
            self.required_capability = CAP_CHAT_END
            return [IsAuthenticated(), HasCapability()]

        self.required_any_capabilities = {CAP_CHAT_ACCEPT, CAP_CHAT_MONITOR}
        return [IsAuthenticated(), HasAnyCapability()]

    def get_throttles(self):
        if settings.TESTING:
            return []
        if self.request.method == "POST":
            return [ChatWriteThrottle()]
        return [ChatPollThrottle()]

    @extend_schema(
        parameters=[OpenApiParameter("status", str, enum=["pending", "active", "ended"])],
        responses=ChatSessionSerializer(many=True),
    )
    def list(self, request):
        try:
            sessions = session_orchestrator.list_sessions(status=request.query_params.get("status"))
        except SERVICE_ERRORS as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="chat.list_sessions")

        return Response(ChatSessionSerializer(sessions, many=True).data)

    @extend_schema(request=None, responses=ChatSessionSerializer)
    @action(detail=True, methods=["post"], url_path="accept")
    def accept(self, request, pk=None):
        try:
            session = session_orchestrator.accept_session(
                session_id=pk,
                accepted_by=_identity(request.user),
            )
        except SERVICE_ERRORS as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="chat.accept_session")

        return Response(ChatSessionSerializer(session).data)

    @extend_schema(request=None, responses=ChatSessionSerializer)
    @action(detail=True, methods=["post"], url_path="end")
    def end(self, request, pk=None):
        try:
            session = session_orchestrator.end_session(
                session_id=pk,
                ended_by=_identity(request.user),
            )
        except SERVICE_ERRORS as exc:
            return service_error_response(exc)
        except DatabaseError as exc:
            return internal_error_response(exc, operation="chat.end_session")

        return Response(ChatSessionSerializer(session).data)
