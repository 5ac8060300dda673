from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from itertools import product

import pytest

from app.core.exceptions import ValidationError
from app.domain.availability import (
    calculate_total_price,
    count_nights,
    intervals_overlap,
    parse_date,
    parse_stay,
    validate_check_in_not_past,
    validate_guest_count,
    validate_room_capacity,
)


def test_three_condition_check_matches_half_open_intersection():
    base = date(2026, 3, 1)
    days = [base + timedelta(days=n) for n in range(6)]
    intervals = [(a, b) for a, b in product(days, days) if a < b]

    for (a1, b1), (a2, b2) in product(intervals, intervals):
        assert intervals_overlap(a1, b1, a2, b2) == (a1 < b2 and a2 < b1), (a1, b1, a2, b2)


def test_back_to_back_stays_do_not_overlap():
    assert not intervals_overlap(date(2026, 3, 1), date(2026, 3, 5), date(2026, 3, 5), date(2026, 3, 7))
    assert not intervals_overlap(date(2026, 3, 5), date(2026, 3, 7), date(2026, 3, 1), date(2026, 3, 5))


def test_contained_and_containing_stays_overlap():
    assert intervals_overlap(date(2026, 3, 1), date(2026, 3, 10), date(2026, 3, 3), date(2026, 3, 4))
    assert intervals_overlap(date(2026, 3, 3), date(2026, 3, 4), date(2026, 3, 1), date(2026, 3, 10))


def test_parse_date_accepts_iso_strings_dates_and_datetimes():
    assert parse_date("2026-03-01") == date(2026, 3, 1)
    assert parse_date("2026-03-01T15:30:00") == date(2026, 3, 1)
    assert parse_date(datetime(2026, 3, 1, 9, 0)) == date(2026, 3, 1)
    assert parse_date(date(2026, 3, 1)) == date(2026, 3, 1)


@pytest.mark.parametrize("value", ["not-a-date", "2026-02-30", "", None, 20260301])
def test_parse_date_rejects_garbage(value):
    with pytest.raises(ValidationError, match="Invalid date format"):
        parse_date(value)


def test_parse_stay_requires_check_out_after_check_in():
    with pytest.raises(ValidationError, match="Check-out date must be after check-in date"):
        parse_stay("2026-03-05", "2026-03-05")
    with pytest.raises(ValidationError, match="Check-out date must be after check-in date"):
        parse_stay("2026-03-06", "2026-03-05")

    stay = parse_stay("2026-03-01", "2026-03-05")
    assert stay.nights == 4


def test_same_day_timestamps_are_one_calendar_date():
    assert parse_date("2026-03-01T09:00:00") == parse_date("2026-03-01T18:00:00")
    with pytest.raises(ValidationError, match="Check-out date must be after check-in date"):
        parse_stay("2026-03-01T09:00:00", "2026-03-01T18:00:00")

    stay = parse_stay("2026-03-01T22:00:00", "2026-03-02T08:00:00")
    assert stay.nights == 1


def test_nights_and_total_price():
    assert count_nights(date(2026, 3, 1), date(2026, 3, 2)) == 1
    assert count_nights(date(2026, 2, 27), date(2026, 3, 2)) == 3
    assert count_nights(datetime(2026, 3, 1, 14), datetime(2026, 3, 2, 11)) == 1
    assert calculate_total_price(Decimal("250.00"), 4) == Decimal("1000.00")


def test_check_in_today_is_accepted_and_yesterday_rejected():
    today = date(2026, 2, 1)
    validate_check_in_not_past(today, today)
    with pytest.raises(ValidationError, match="cannot be in the past"):
        validate_check_in_not_past(today - timedelta(days=1), today)


def test_guest_count_bounds():
    validate_guest_count(1)
    with pytest.raises(ValidationError, match="Guests must be a positive number"):
        validate_guest_count(0)

    validate_room_capacity(2, capacity=2)
    with pytest.raises(ValidationError, match="Room capacity is 2 guests"):
        validate_room_capacity(3, capacity=2)
