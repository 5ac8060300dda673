"""Storage contract for rooms, properties and bookings.

Booking logic receives a ``BookingStore`` instead of reaching for a shared
database client, so the same rules run against PostgreSQL in production and
against ``InMemoryBookingStore`` in tests.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from app.models.booking import Booking
from app.models.property import Property, Room


@dataclass
class PropertyFilters:
    """Search filters for the property listing."""

    city: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    guests: int | None = None
    amenities: list[str] = field(default_factory=list)

    @property
    def has_room_filters(self) -> bool:
        return (
            self.min_price is not None
            or self.max_price is not None
            or self.guests is not None
        )

    def room_matches(self, room: Room) -> bool:
        if self.min_price is not None and room.price < self.min_price:
            return False
        if self.max_price is not None and room.price > self.max_price:
            return False
        if self.guests is not None and room.capacity < self.guests:
            return False
        return True


@dataclass
class PropertyMatch:
    """A property row from a search, with aggregates over its rooms."""

    property: Property
    room_count: int
    min_price: Decimal | None


class BookingStore(ABC):
    """Persistence capability used by the booking service."""

    @abstractmethod
    def room_guard(self, room_id: UUID) -> AbstractAsyncContextManager[None]:
        """Exclusive access to one room's booking set.

        Everything between entering and leaving the guard (lookup, overlap
        query, insert or update) is serialized against other guarded
        operations on the same room.
        """

    @abstractmethod
    async def get_room(self, room_id: UUID) -> Room | None:
        """Resolve a room together with its property."""

    @abstractmethod
    async def find_conflicting_booking(
        self, room_id: UUID, check_in: date, check_out: date
    ) -> Booking | None:
        """First pending/confirmed booking of the room overlapping the stay."""

    @abstractmethod
    async def add_booking(self, booking: Booking) -> Booking:
        """Persist a new booking.

        Raises DatesNotAvailable if storage rejects it as overlapping.
        """

    @abstractmethod
    async def get_booking(self, booking_id: UUID, *, for_update: bool = False) -> Booking | None:
        """Resolve a booking with its room and property.

        ``for_update`` re-reads current state, for use inside ``room_guard``.
        """

    @abstractmethod
    async def save_booking(self, booking: Booking) -> Booking:
        """Persist changes to an existing booking."""

    @abstractmethod
    async def list_bookings_for_user(self, user_id: UUID) -> list[Booking]:
        """A user's bookings, newest first."""

    @abstractmethod
    async def get_property(self, property_id: UUID) -> Property | None:
        """Resolve a property with its rooms."""

    @abstractmethod
    async def search_properties(
        self, filters: PropertyFilters, offset: int, limit: int
    ) -> tuple[list[PropertyMatch], int]:
        """One page of matching properties plus the total match count."""
