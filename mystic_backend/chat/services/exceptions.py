# chat/services/exceptions.py

"""
CHAT SERVICE ERRORS

Expected, user-facing conditions of the live chat workflow.
Views map `code` onto HTTP via backend.api_errors.
"""


class ChatServiceError(Exception):
    """Base exception for chat failures."""

    code = "CHAT_ERROR"


class ChatValidationError(ChatServiceError):
    """Malformed input: duration out of range, empty message, bad cursor."""

    code = "VALIDATION_ERROR"


class SessionNotFoundError(ChatServiceError):
    code = "NOT_FOUND"


class InvalidSessionTransitionError(ChatServiceError):
    """An action attempted against a session in the wrong state."""

    code = "INVALID_TRANSITION"


class SessionNotActiveError(ChatServiceError):
    """Posting to a session that is not (or no longer) active."""

    code = "SESSION_NOT_ACTIVE"


class SessionExpiredError(SessionNotActiveError):
    """
    The session's allotted time has elapsed.
    Kept distinct so clients can show "time's up" instead of a generic error.
    """

    code = "SESSION_EXPIRED"
