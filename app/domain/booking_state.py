"""Booking state machine."""

from enum import Enum

from app.core.exceptions import InvalidBookingStatus


class BookingStatus(str, Enum):
    """Booking lifecycle states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    """Payment states (owned by the payment flow, read-only here)."""

    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


# Statuses that hold a room's dates
ACTIVE_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED}
)

BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def assert_booking_transition(current: str | BookingStatus, target: str | BookingStatus) -> None:
    """Raise InvalidBookingStatus unless ``current`` may move to ``target``."""
    current = BookingStatus(current)
    target = BookingStatus(target)

    if target in BOOKING_TRANSITIONS[current]:
        return

    if target is BookingStatus.CANCELLED:
        if current is BookingStatus.COMPLETED:
            raise InvalidBookingStatus("Cannot cancel a completed booking")
        if current is BookingStatus.CANCELLED:
            raise InvalidBookingStatus("Booking is already cancelled")

    raise InvalidBookingStatus(
        f"Invalid booking transition: {current.value} → {target.value}"
    )
