from __future__ import annotations

import asyncio
import uuid
from datetime import date
from decimal import Decimal

import pytest

from app.models.property import Property, Room
from app.repositories.memory import InMemoryBookingStore
from app.services.booking_service import BookingService, Requester

TODAY = date(2026, 2, 1)


def run(coro):
    return asyncio.run(coro)


def make_property(**overrides) -> Property:
    fields = {
        "id": uuid.uuid4(),
        "owner_id": uuid.uuid4(),
        "name": "Harbour View Hotel",
        "description": None,
        "address": "1 Quay Street",
        "city": "Dubai",
        "country": "United Arab Emirates",
        "latitude": None,
        "longitude": None,
        "images": [],
        "amenities": ["Pool", "WiFi"],
        "rating": 4.5,
        "review_count": 10,
        "featured": False,
    }
    fields.update(overrides)
    return Property(**fields)


def make_room(prop: Property | None = None, **overrides) -> Room:
    prop = prop or make_property()
    fields = {
        "id": uuid.uuid4(),
        "property_id": prop.id,
        "name": "Double Room",
        "description": None,
        "room_type": "standard",
        "capacity": 2,
        "price": Decimal("250.00"),
        "available": True,
        "images": [],
        "amenities": [],
    }
    fields.update(overrides)
    room = Room(**fields)
    room.property = prop
    return room


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def room(store: InMemoryBookingStore) -> Room:
    prop = make_property()
    room = make_room(prop)
    store.add_property(prop)
    return room


@pytest.fixture
def service(store: InMemoryBookingStore) -> BookingService:
    return BookingService(store, today=lambda: TODAY)


@pytest.fixture
def guest() -> Requester:
    return Requester(user_id=uuid.uuid4())


@pytest.fixture
def admin() -> Requester:
    return Requester(user_id=uuid.uuid4(), role="admin")
