#!/usr/bin/env python3
"""Seed demo users, properties and rooms."""

import asyncio
import logging
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import select

from app.database import close_db, get_session_maker
from app.models.property import Property, Room
from app.models.user import User

logger = logging.getLogger("seed")

DEMO_USERS = [
    ("admin@example.com", "Admin User", "admin"),
    ("owner@example.com", "Hotel Owner", "owner"),
    ("user@example.com", "John Doe", "user"),
]

DEMO_PROPERTIES = [
    {
        "name": "Burj Al Arab Jumeirah",
        "description": "Iconic sail-shaped hotel with a private beach.",
        "address": "Jumeirah Beach Road",
        "city": "Dubai",
        "country": "United Arab Emirates",
        "latitude": Decimal("25.1412"),
        "longitude": Decimal("55.1853"),
        "amenities": ["Pool", "Spa", "Restaurant", "Beach Access", "Gym", "WiFi"],
        "rating": 4.9,
        "review_count": 1250,
        "featured": True,
        "rooms": [
            ("Deluxe Marina Suite", "suite", 2, Decimal("1500.00")),
            ("Panoramic Family Suite", "family", 4, Decimal("3200.00")),
        ],
    },
    {
        "name": "Rove Downtown",
        "description": "Modern, affordable hotel near Dubai Mall.",
        "address": "Al Mustaqbal Street",
        "city": "Dubai",
        "country": "United Arab Emirates",
        "latitude": Decimal("25.1915"),
        "longitude": Decimal("55.2678"),
        "amenities": ["Pool", "Gym", "Restaurant", "WiFi", "Laundry"],
        "rating": 4.3,
        "review_count": 945,
        "featured": False,
        "rooms": [
            ("Rover Room", "standard", 2, Decimal("250.00")),
            ("Connecting Rooms", "family", 4, Decimal("420.00")),
        ],
    },
]


async def seed() -> None:
    """Insert demo data unless it already exists."""
    async with get_session_maker()() as session:
        users: dict[str, User] = {}
        for email, name, role in DEMO_USERS:
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
            if user is None:
                user = User(id=uuid4(), email=email, name=name, role=role)
                session.add(user)
                logger.info(f"Created user {email} ({role})")
            users[role] = user

        for data in DEMO_PROPERTIES:
            result = await session.execute(select(Property).where(Property.name == data["name"]))
            if result.scalar_one_or_none():
                logger.info(f"Property {data['name']} already present")
                continue

            fields = {k: v for k, v in data.items() if k != "rooms"}
            prop = Property(id=uuid4(), owner=users["owner"], images=[], **fields)
            for name, room_type, capacity, price in data["rooms"]:
                prop.rooms.append(
                    Room(
                        id=uuid4(),
                        name=name,
                        room_type=room_type,
                        capacity=capacity,
                        price=price,
                        available=True,
                        images=[],
                        amenities=[],
                    )
                )
            session.add(prop)
            logger.info(f"Created property {prop.name} with {len(prop.rooms)} rooms")

        await session.commit()
    await close_db()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(seed())
