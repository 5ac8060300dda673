"""In-memory booking store.

Holds model instances in dictionaries and serializes per-room work with
``asyncio.Lock``. Used by the test suite and for running the API without a
database.
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from app.core.exceptions import DatesNotAvailable
from app.domain.availability import intervals_overlap
from app.domain.booking_state import ACTIVE_STATUSES, BookingStatus
from app.models.booking import Booking
from app.models.property import Property, Room
from app.repositories.base import BookingStore, PropertyFilters, PropertyMatch


def _is_active(booking: Booking) -> bool:
    return BookingStatus(booking.status) in ACTIVE_STATUSES


class InMemoryBookingStore(BookingStore):
    """Dictionary-backed store with the same contract as the SQL store."""

    def __init__(self) -> None:
        self.properties: dict[UUID, Property] = {}
        self.rooms: dict[UUID, Room] = {}
        self.bookings: dict[UUID, Booking] = {}
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._lock_users: defaultdict[UUID, int] = defaultdict(int)

    # Seeding helpers

    def add_property(self, prop: Property) -> Property:
        self.properties[prop.id] = prop
        for room in prop.rooms:
            self.rooms[room.id] = room
        return prop

    def add_room(self, room: Room) -> Room:
        self.rooms[room.id] = room
        if room.property is not None:
            self.properties.setdefault(room.property.id, room.property)
        return room

    # BookingStore

    @asynccontextmanager
    async def room_guard(self, room_id: UUID) -> AsyncIterator[None]:
        lock = self._locks.setdefault(room_id, asyncio.Lock())
        self._lock_users[room_id] += 1
        try:
            async with lock:
                yield
        finally:
            # Drop the lock once no holder or waiter is left
            self._lock_users[room_id] -= 1
            if not self._lock_users[room_id]:
                del self._lock_users[room_id]
                del self._locks[room_id]

    async def get_room(self, room_id: UUID) -> Room | None:
        await asyncio.sleep(0)
        return self.rooms.get(room_id)

    async def find_conflicting_booking(
        self, room_id: UUID, check_in: date, check_out: date
    ) -> Booking | None:
        await asyncio.sleep(0)
        candidates = sorted(
            (
                booking
                for booking in self.bookings.values()
                if booking.room_id == room_id
                and _is_active(booking)
                and intervals_overlap(booking.check_in, booking.check_out, check_in, check_out)
            ),
            key=lambda booking: booking.check_in,
        )
        return candidates[0] if candidates else None

    async def add_booking(self, booking: Booking) -> Booking:
        await asyncio.sleep(0)
        # Same guarantee as the database exclusion constraint
        if _is_active(booking) and any(
            existing.room_id == booking.room_id
            and _is_active(existing)
            and existing.check_in < booking.check_out
            and booking.check_in < existing.check_out
            for existing in self.bookings.values()
        ):
            raise DatesNotAvailable()
        if booking.room is None and booking.room_id in self.rooms:
            booking.room = self.rooms[booking.room_id]
        self.bookings[booking.id] = booking
        return booking

    async def get_booking(self, booking_id: UUID, *, for_update: bool = False) -> Booking | None:
        await asyncio.sleep(0)
        return self.bookings.get(booking_id)

    async def save_booking(self, booking: Booking) -> Booking:
        await asyncio.sleep(0)
        self.bookings[booking.id] = booking
        return booking

    async def list_bookings_for_user(self, user_id: UUID) -> list[Booking]:
        return sorted(
            (booking for booking in self.bookings.values() if booking.user_id == user_id),
            key=lambda booking: booking.created_at,
            reverse=True,
        )

    async def get_property(self, property_id: UUID) -> Property | None:
        prop = self.properties.get(property_id)
        if prop is not None:
            # Cheapest first, as the relationship loads them from the database
            prop.rooms.sort(key=lambda room: room.price)
        return prop

    async def search_properties(
        self, filters: PropertyFilters, offset: int, limit: int
    ) -> tuple[list[PropertyMatch], int]:
        wanted_amenities = {amenity.lower() for amenity in filters.amenities}
        matches = []
        for prop in self.properties.values():
            if filters.city and filters.city.lower() not in prop.city.lower():
                continue
            if wanted_amenities - {amenity.lower() for amenity in prop.amenities or []}:
                continue
            matching_rooms = [room for room in prop.rooms if filters.room_matches(room)]
            if filters.has_room_filters and not matching_rooms:
                continue
            matches.append(
                PropertyMatch(
                    property=prop,
                    room_count=len(prop.rooms),
                    min_price=min((room.price for room in matching_rooms), default=None),
                )
            )

        matches.sort(key=lambda match: (match.property.featured, match.property.rating), reverse=True)
        return matches[offset : offset + limit], len(matches)
