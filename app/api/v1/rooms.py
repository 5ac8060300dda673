"""Room endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.deps import get_booking_store
from app.core.exceptions import NotFoundError
from app.models.property import Room
from app.repositories.base import BookingStore
from app.schemas.property import RoomWithPropertyResponse

router = APIRouter()


@router.get("/{room_id}", response_model=RoomWithPropertyResponse)
async def get_room(
    room_id: UUID,
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> Room:
    """Get a room with a summary of its property."""
    room = await store.get_room(room_id)
    if not room:
        raise NotFoundError("Room", str(room_id))
    return room
