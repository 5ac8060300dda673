"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import get_booking_service, get_current_requester
from app.core.middleware import booking_limiter
from app.models.booking import Booking
from app.schemas.booking import (
    AvailabilityRequest,
    AvailabilityResponse,
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    ConflictingDates,
)
from app.services.booking_service import BookingService, Requester

router = APIRouter()


@router.post("/check-availability", response_model=AvailabilityResponse)
async def check_availability(
    request: AvailabilityRequest,
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> AvailabilityResponse:
    """Check whether a room is free for the given dates and quote the price."""
    result = await service.check_availability(request.room_id, request.check_in, request.check_out)

    conflicting_dates = None
    if result.conflicting_check_in is not None and result.conflicting_check_out is not None:
        conflicting_dates = ConflictingDates(
            check_in=result.conflicting_check_in,
            check_out=result.conflicting_check_out,
        )

    return AvailabilityResponse(
        available=result.available,
        reason=result.reason,
        conflicting_dates=conflicting_dates,
        price_per_night=result.price_per_night,
        nights=result.nights,
        total_price=result.total_price,
    )


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(booking_limiter)],
)
async def create_booking(
    booking_data: BookingCreate,
    requester: Annotated[Requester, Depends(get_current_requester)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Create a new pending booking."""
    return await service.create_booking(
        requester,
        room_id=booking_data.room_id,
        check_in=booking_data.check_in,
        check_out=booking_data.check_out,
        guests=booking_data.guests,
        special_requests=booking_data.special_requests,
    )


@router.get("", response_model=BookingListResponse)
async def get_my_bookings(
    requester: Annotated[Requester, Depends(get_current_requester)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> BookingListResponse:
    """Get bookings for the current user."""
    bookings = await service.list_bookings(requester)
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    requester: Annotated[Requester, Depends(get_current_requester)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Get a booking by ID (owner or admin)."""
    return await service.get_booking(requester, booking_id)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    request: BookingStatusUpdate,
    requester: Annotated[Requester, Depends(get_current_requester)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Cancel a booking. No other status change is accepted."""
    return await service.cancel_booking(
        requester,
        booking_id,
        desired_status=request.status,
        reason=request.reason,
    )
