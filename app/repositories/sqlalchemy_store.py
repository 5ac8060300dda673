"""PostgreSQL-backed booking store."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import DatesNotAvailable
from app.domain.booking_state import ACTIVE_STATUSES
from app.models.booking import Booking
from app.models.property import Property, Room
from app.repositories.base import BookingStore, PropertyFilters, PropertyMatch

logger = logging.getLogger(__name__)

OVERLAP_CONSTRAINT = "bookings_no_active_overlap"


def conflicting_booking_query(room_id: UUID, check_in: date, check_out: date) -> Select:
    """Active bookings of a room overlapping ``[check_in, check_out)``."""
    return select(Booking).where(
        Booking.room_id == room_id,
        Booking.status.in_([status.value for status in ACTIVE_STATUSES]),
        or_(
            # New stay starts during an existing booking
            and_(
                Booking.check_in <= check_in,
                Booking.check_out > check_in,
            ),
            # New stay ends during an existing booking
            and_(
                Booking.check_in < check_out,
                Booking.check_out >= check_out,
            ),
            # New stay contains an existing booking
            and_(
                Booking.check_in >= check_in,
                Booking.check_out <= check_out,
            ),
        ),
    ).order_by(Booking.check_in).limit(1)


def room_lock_query(room_id: UUID) -> Select:
    return select(Room.id).where(Room.id == room_id).with_for_update()


def _room_conditions(filters: PropertyFilters) -> list:
    conditions = []
    if filters.min_price is not None:
        conditions.append(Room.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Room.price <= filters.max_price)
    if filters.guests is not None:
        conditions.append(Room.capacity >= filters.guests)
    return conditions


def property_search_query(filters: PropertyFilters) -> Select:
    """Matching properties with their cheapest matching room and room count."""
    room_conditions = _room_conditions(filters)

    min_price = (
        select(func.min(Room.price))
        .where(Room.property_id == Property.id, *room_conditions)
        .correlate(Property)
        .scalar_subquery()
    )
    room_count = (
        select(func.count(Room.id))
        .where(Room.property_id == Property.id)
        .correlate(Property)
        .scalar_subquery()
    )

    query = select(Property, min_price.label("min_price"), room_count.label("room_count"))

    if filters.city:
        query = query.where(Property.city.ilike(f"%{filters.city}%"))

    if room_conditions:
        query = query.where(Property.rooms.any(and_(*room_conditions)))

    for amenity in filters.amenities:
        element = func.unnest(Property.amenities).column_valued("amenity")
        query = query.where(
            select(element).where(func.lower(element) == amenity.lower()).exists()
        )

    return query


class SqlAlchemyBookingStore(BookingStore):
    """Booking store on an async SQLAlchemy session.

    The session's transaction is owned by the caller (``get_db`` commits or
    rolls back per request), so the room row lock taken by ``room_guard`` is
    held until the booking write commits.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def room_guard(self, room_id: UUID) -> AsyncIterator[None]:
        await self.db.execute(room_lock_query(room_id))
        yield

    async def get_room(self, room_id: UUID) -> Room | None:
        result = await self.db.execute(
            select(Room).options(selectinload(Room.property)).where(Room.id == room_id)
        )
        return result.scalar_one_or_none()

    async def find_conflicting_booking(
        self, room_id: UUID, check_in: date, check_out: date
    ) -> Booking | None:
        result = await self.db.execute(conflicting_booking_query(room_id, check_in, check_out))
        return result.scalar_one_or_none()

    async def add_booking(self, booking: Booking) -> Booking:
        self.db.add(booking)
        try:
            await self.db.flush()
        except IntegrityError as e:
            if OVERLAP_CONSTRAINT in str(e.orig):
                logger.warning(
                    f"Overlap constraint rejected booking for room {booking.room_id} "
                    f"({booking.check_in} → {booking.check_out})"
                )
                raise DatesNotAvailable() from e
            raise
        return booking

    async def get_booking(self, booking_id: UUID, *, for_update: bool = False) -> Booking | None:
        query = (
            select(Booking)
            .options(selectinload(Booking.room).selectinload(Room.property))
            .where(Booking.id == booking_id)
        )
        if for_update:
            query = query.with_for_update(of=Booking).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def save_booking(self, booking: Booking) -> Booking:
        await self.db.flush()
        return booking

    async def list_bookings_for_user(self, user_id: UUID) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .options(selectinload(Booking.room).selectinload(Room.property))
            .where(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_property(self, property_id: UUID) -> Property | None:
        result = await self.db.execute(
            select(Property).options(selectinload(Property.rooms)).where(Property.id == property_id)
        )
        return result.scalar_one_or_none()

    async def search_properties(
        self, filters: PropertyFilters, offset: int, limit: int
    ) -> tuple[list[PropertyMatch], int]:
        query = property_search_query(filters)

        count_result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        total = count_result.scalar() or 0

        query = (
            query.order_by(Property.featured.desc(), Property.rating.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(query)
        matches = [
            PropertyMatch(property=row[0], min_price=row.min_price, room_count=row.room_count)
            for row in result.all()
        ]
        return matches, total
