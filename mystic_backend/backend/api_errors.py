# backend/api_errors.py

"""
API ERROR NORMALIZATION

Every domain error leaves the API as:
    {"error": {"code": "...", "message": "..."}}

Service layers raise typed errors carrying a `code`; views translate them
here so HTTP status mapping lives in one place.
"""

from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


# code -> HTTP status
STATUS_BY_CODE = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INSUFFICIENT_CREDITS": status.HTTP_402_PAYMENT_REQUIRED,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "SESSION_NOT_ACTIVE": status.HTTP_409_CONFLICT,
    "SESSION_EXPIRED": status.HTTP_409_CONFLICT,
    "INTAKE_ALREADY_SUBMITTED": status.HTTP_409_CONFLICT,
    "SERVICE_IN_USE": status.HTTP_409_CONFLICT,
}


def error_response(*, code: str, message: str, http_status: int, **details):
    """
    Canonical API error response.
    """
    body = {"code": code, "message": message}
    body.update(details)
    return Response({"error": body}, status=http_status)


def service_error_response(exc: Exception):
    """
    Map a typed service error onto the canonical envelope.
    Unknown codes fall back to 400.
    """
    code = getattr(exc, "code", None) or "BAD_REQUEST"
    http_status = STATUS_BY_CODE.get(code, status.HTTP_400_BAD_REQUEST)

    details = {}
    if code == "INSUFFICIENT_CREDITS":
        details = {
            "required_cents": exc.required_cents,
            "available_cents": exc.available_cents,
        }

    return error_response(code=code, message=str(exc), http_status=http_status, **details)


def internal_error_response(exc: Exception, *, operation: str):
    """
    Storage failures: log with traceback, return an opaque 500.
    """
    logger.exception("Unhandled storage failure", extra={"operation": operation})
    return error_response(
        code="INTERNAL_ERROR",
        message="An internal error occurred. Please try again.",
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def api_exception_handler(exc, context):
    """
    REST_FRAMEWORK EXCEPTION_HANDLER.

    DRF's own errors (serializer validation, auth, permissions, throttling,
    unknown routes) are rewrapped into the same envelope. Headers such as
    WWW-Authenticate and Retry-After are kept.
    """
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        body = {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data.",
            "fields": response.data,
        }
    else:
        detail = response.data.get("detail", "") if isinstance(response.data, dict) else response.data
        code = getattr(exc, "default_code", None) or "error"
        body = {"code": str(code).upper(), "message": str(detail)}

    response.data = {"error": body}
    return response
