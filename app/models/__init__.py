"""Database models."""

from app.models.booking import Booking
from app.models.property import Property, Room
from app.models.user import User

__all__ = [
    "User",
    "Property",
    "Room",
    "Booking",
]
