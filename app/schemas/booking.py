"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.booking_state import BookingStatus, PaymentStatus
from app.schemas.property import RoomWithPropertyResponse


class AvailabilityRequest(BaseModel):
    """Schema for checking room availability."""

    room_id: UUID
    check_in: date
    check_out: date


class ConflictingDates(BaseModel):
    check_in: date
    check_out: date


class AvailabilityResponse(BaseModel):
    """Availability result; price fields only when available."""

    available: bool
    reason: str | None = None
    conflicting_dates: ConflictingDates | None = None
    price_per_night: float | None = None
    nights: int | None = None
    total_price: float | None = None


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    room_id: UUID
    check_in: date
    check_out: date
    guests: int
    special_requests: str | None = Field(None, max_length=1000)


class BookingStatusUpdate(BaseModel):
    """Schema for changing a booking's status (cancellation only)."""

    status: str
    reason: str | None = Field(None, max_length=1000)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    room_id: UUID
    user_id: UUID

    # Dates
    check_in: date
    check_out: date
    nights: int

    guests: int
    total_price: float

    # Status
    status: BookingStatus
    payment_status: PaymentStatus

    special_requests: str | None

    # Cancellation
    cancellation_reason: str | None
    cancelled_at: datetime | None

    # Timestamps
    created_at: datetime
    updated_at: datetime

    room: RoomWithPropertyResponse | None = None


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]
