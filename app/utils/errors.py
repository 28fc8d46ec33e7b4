"""Application error taxonomy.

Each error carries a stable machine code, an HTTP status and a message that is
safe to show to the caller. ``main.py`` renders them through
``app.utils.response_utils.error_response``.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "INTERNAL"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class UnauthenticatedError(AppError):
    code = "UNAUTHENTICATED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidArgumentError(AppError):
    code = "INVALID_ARGUMENT"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class LocationNotFoundError(NotFoundError):
    default_message = "Location not found. Please check the city name."


class PermissionDeniedError(AppError):
    code = "PERMISSION_DENIED"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You don't have permission to perform this action"


class ResourceExhaustedError(AppError):
    code = "RESOURCE_EXHAUSTED"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded. Please try again later."


class QuotaExhaustedError(ResourceExhaustedError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "You have used all your free searches. Please upgrade to continue."


class InternalError(AppError):
    pass


class UpstreamUnavailableError(Exception):
    """An external service (geocoding, places) failed or answered with an error.

    Raised by the service clients only; the search service converts it to
    ``InternalError`` before it reaches the caller.
    """

    def __init__(self, service: str, reason: str):
        self.service = service
        self.reason = reason
        super().__init__(f"{service} unavailable: {reason}")
