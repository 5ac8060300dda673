"""Application errors and the HTTP status each one maps to.

Every error is an ``HTTPException`` so routes and services can raise them
directly; ``main`` renders them as ``{"detail": ...}``.
"""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application error.

    Subclasses set ``http_status`` and ``default_detail``.
    """

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(
            status_code=self.http_status,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(AppException):
    """Malformed or out-of-range input."""

    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Validation failed"

    def __init__(self, detail: str | None = None, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(detail)


class NotFoundError(AppException):
    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        if identifier:
            super().__init__(f"{resource} with ID '{identifier}' not found")
        else:
            super().__init__(f"{resource} not found")


class AuthenticationError(AppException):
    http_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(AppException):
    http_status = status.HTTP_403_FORBIDDEN
    default_detail = "You don't have permission to access this resource"


class ConflictError(AppException):
    """Request clashes with the current state of a room's bookings."""

    http_status = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class RoomNotAvailable(ConflictError):
    """Room switched off for booking by its owner."""

    default_detail = "Room is not available"


class DatesNotAvailable(ConflictError):
    """An active booking already covers part of the requested stay."""

    default_detail = "Room is not available for the selected dates"


class InvalidBookingStatus(AppException):
    """Transition not allowed from the booking's current status."""

    http_status = status.HTTP_400_BAD_REQUEST
    default_detail = "This operation is not allowed for the current booking status"


class RateLimitExceeded(AppException):
    http_status = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = "Too many requests. Please try again later."
