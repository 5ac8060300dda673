"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    AvailabilityRequest,
    AvailabilityResponse,
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from app.schemas.property import (
    Pagination,
    PropertyDetailResponse,
    PropertyListItem,
    PropertyListResponse,
    RoomWithPropertyResponse,
)

__all__ = [
    # Booking
    "AvailabilityRequest",
    "AvailabilityResponse",
    "BookingCreate",
    "BookingListResponse",
    "BookingResponse",
    "BookingStatusUpdate",
    # Property
    "Pagination",
    "PropertyDetailResponse",
    "PropertyListItem",
    "PropertyListResponse",
    "RoomWithPropertyResponse",
]
