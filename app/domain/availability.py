"""Stay dates, overlap and pricing rules.

Stays are half-open intervals ``[check_in, check_out)``: the check-out day is
free for the next guest, so back-to-back bookings never conflict.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal

from app.core.exceptions import ValidationError

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StayDates:
    """A validated stay interval."""

    check_in: date
    check_out: date

    @property
    def nights(self) -> int:
        return count_nights(self.check_in, self.check_out)


def parse_date(value: str | date | datetime) -> date:
    """Coerce an ISO string, date or datetime into a calendar date.

    Stays are whole calendar days. Any time of day is discarded, so two
    timestamps on the same day parse to the same date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            pass
    raise ValidationError("Invalid date format")


def parse_stay(check_in: str | date | datetime, check_out: str | date | datetime) -> StayDates:
    """Parse both dates and require check-out strictly after check-in."""
    stay = StayDates(parse_date(check_in), parse_date(check_out))
    if stay.check_in >= stay.check_out:
        raise ValidationError("Check-out date must be after check-in date")
    return stay


def intervals_overlap(
    existing_check_in: date,
    existing_check_out: date,
    new_check_in: date,
    new_check_out: date,
) -> bool:
    """Overlap test mirrored by the storage query.

    Equivalent to ``existing_check_in < new_check_out and new_check_in < existing_check_out``
    for non-empty intervals.
    """
    starts_inside = existing_check_in <= new_check_in and existing_check_out > new_check_in
    ends_inside = existing_check_in < new_check_out and existing_check_out >= new_check_out
    contains = existing_check_in >= new_check_in and existing_check_out <= new_check_out
    return starts_inside or ends_inside or contains


def count_nights(check_in: date, check_out: date) -> int:
    """Whole nights between two dates.

    Partial days round up; only reachable when called with datetimes, since
    ``parse_date`` already truncates to calendar dates.
    """
    return math.ceil((check_out - check_in) / ONE_DAY)


def calculate_total_price(price_per_night: Decimal, nights: int) -> Decimal:
    return Decimal(price_per_night) * nights


def validate_check_in_not_past(check_in: date, today: date) -> None:
    if check_in < today:
        raise ValidationError("Check-in date cannot be in the past")


def validate_guest_count(guests: int) -> None:
    if guests <= 0:
        raise ValidationError("Guests must be a positive number")


def validate_room_capacity(guests: int, capacity: int) -> None:
    if guests > capacity:
        raise ValidationError(f"Room capacity is {capacity} guests")
