"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatesNotAvailable,
    InvalidBookingStatus,
    NotFoundError,
    RateLimitExceeded,
    RoomNotAvailable,
    ValidationError,
)
from app.core.security import create_access_token, verify_token

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DatesNotAvailable",
    "InvalidBookingStatus",
    "NotFoundError",
    "RateLimitExceeded",
    "RoomNotAvailable",
    "ValidationError",
    "create_access_token",
    "verify_token",
]
