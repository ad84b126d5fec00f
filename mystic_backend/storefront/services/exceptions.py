# storefront/services/exceptions.py

"""
STOREFRONT SERVICE ERRORS
"""


class StorefrontServiceError(Exception):
    code = "STOREFRONT_ERROR"


class StorefrontValidationError(StorefrontServiceError):
    code = "VALIDATION_ERROR"


class ServiceNotFoundError(StorefrontServiceError):
    code = "NOT_FOUND"


class OrderNotFoundError(StorefrontServiceError):
    code = "NOT_FOUND"


class InvalidOrderTransitionError(StorefrontServiceError):
    code = "INVALID_TRANSITION"


class IntakeAlreadySubmittedError(StorefrontServiceError):
    code = "INTAKE_ALREADY_SUBMITTED"


class ServiceInUseError(StorefrontServiceError):
    """Services with orders cannot be deleted; deactivate them instead."""

    code = "SERVICE_IN_USE"
