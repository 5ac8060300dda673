"""Booking availability, creation and cancellation.

Every write runs inside ``store.room_guard`` so the overlap check and the
insert/update it protects cannot interleave with another request on the same
room. Validation always completes before anything is written.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID
from zoneinfo import ZoneInfo

from app.config import settings
from app.core.exceptions import (
    AuthorizationError,
    DatesNotAvailable,
    NotFoundError,
    RoomNotAvailable,
    ValidationError,
)
from app.domain.availability import (
    calculate_total_price,
    parse_stay,
    validate_check_in_not_past,
    validate_guest_count,
    validate_room_capacity,
)
from app.domain.booking_state import BookingStatus, PaymentStatus, assert_booking_transition
from app.models.booking import Booking
from app.repositories.base import BookingStore

logger = logging.getLogger(__name__)

ROOM_DISABLED_REASON = "Room is currently not available for booking"
ROOM_BOOKED_REASON = "Room is already booked for the selected dates"


@dataclass(frozen=True)
class Requester:
    """Authenticated caller, as asserted by the auth service."""

    user_id: UUID
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    reason: str | None = None
    conflicting_check_in: date | None = None
    conflicting_check_out: date | None = None
    price_per_night: Decimal | None = None
    nights: int | None = None
    total_price: Decimal | None = None


def today_for_bookings() -> date:
    """Current calendar date used for the past check-in rule."""
    if settings.booking_timezone:
        return datetime.now(ZoneInfo(settings.booking_timezone)).date()
    return date.today()


class BookingService:
    """Booking operations over an injected store."""

    def __init__(self, store: BookingStore, today: Callable[[], date] = today_for_bookings):
        self.store = store
        self.today = today

    async def check_availability(self, room_id: UUID, check_in, check_out) -> AvailabilityResult:
        """Report whether a room is free for a stay and what it would cost."""
        stay = parse_stay(check_in, check_out)

        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFoundError("Room", str(room_id))

        if not room.available:
            return AvailabilityResult(available=False, reason=ROOM_DISABLED_REASON)

        conflict = await self.store.find_conflicting_booking(room.id, stay.check_in, stay.check_out)
        if conflict is not None:
            return AvailabilityResult(
                available=False,
                reason=ROOM_BOOKED_REASON,
                conflicting_check_in=conflict.check_in,
                conflicting_check_out=conflict.check_out,
            )

        return AvailabilityResult(
            available=True,
            price_per_night=room.price,
            nights=stay.nights,
            total_price=calculate_total_price(room.price, stay.nights),
        )

    async def create_booking(
        self,
        requester: Requester,
        room_id: UUID,
        check_in,
        check_out,
        guests: int,
        special_requests: str | None = None,
    ) -> Booking:
        """Validate and persist a new pending booking."""
        stay = parse_stay(check_in, check_out)
        validate_check_in_not_past(stay.check_in, self.today())
        validate_guest_count(guests)

        async with self.store.room_guard(room_id):
            room = await self.store.get_room(room_id)
            if room is None:
                raise NotFoundError("Room", str(room_id))
            if not room.available:
                raise RoomNotAvailable()

            validate_room_capacity(guests, room.capacity)

            conflict = await self.store.find_conflicting_booking(
                room.id, stay.check_in, stay.check_out
            )
            if conflict is not None:
                logger.warning(
                    f"Booking rejected for room {room.id}: {stay.check_in} → {stay.check_out} "
                    f"overlaps booking {conflict.id}"
                )
                raise DatesNotAvailable()

            now = datetime.now(UTC)
            booking = Booking(
                id=uuid.uuid4(),
                room_id=room.id,
                user_id=requester.user_id,
                check_in=stay.check_in,
                check_out=stay.check_out,
                guests=guests,
                total_price=calculate_total_price(room.price, stay.nights),
                status=BookingStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                special_requests=special_requests or None,
                created_at=now,
                updated_at=now,
            )
            booking.room = room
            booking = await self.store.add_booking(booking)

        logger.info(
            f"Booking {booking.id} created for room {room.id} by user {requester.user_id} "
            f"({stay.nights} nights, total {booking.total_price})"
        )
        return booking

    async def cancel_booking(
        self,
        requester: Requester,
        booking_id: UUID,
        desired_status: str = BookingStatus.CANCELLED.value,
        reason: str | None = None,
    ) -> Booking:
        """Cancel a pending or confirmed booking.

        Payment status is left alone; refunds belong to the payment flow.
        """
        booking = await self.get_booking(requester, booking_id)

        if desired_status != BookingStatus.CANCELLED.value:
            raise ValidationError("Only cancellation is allowed")

        assert_booking_transition(booking.status, BookingStatus.CANCELLED)

        async with self.store.room_guard(booking.room_id):
            booking = await self.store.get_booking(booking_id, for_update=True)
            if booking is None:
                raise NotFoundError("Booking", str(booking_id))
            assert_booking_transition(booking.status, BookingStatus.CANCELLED)

            now = datetime.now(UTC)
            booking.status = BookingStatus.CANCELLED.value
            booking.cancellation_reason = reason
            booking.cancelled_at = now
            booking.updated_at = now
            booking = await self.store.save_booking(booking)

        logger.info(f"Booking {booking.id} cancelled by user {requester.user_id}")
        return booking

    async def get_booking(self, requester: Requester, booking_id: UUID) -> Booking:
        """Fetch a booking visible to the requester."""
        booking = await self.store.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        if booking.user_id != requester.user_id and not requester.is_admin:
            raise AuthorizationError("You don't have permission to access this booking")
        return booking

    async def list_bookings(self, requester: Requester) -> list[Booking]:
        return await self.store.list_bookings_for_user(requester.user_id)
