from __future__ import annotations

import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_booking_store
from app.main import app
from app.tests.conftest import make_property, make_room

API = "/api/v1"


@pytest.fixture
def catalog(store):
    palace = make_property(name="Palace", city="Dubai", amenities=["Pool", "Spa"], rating=4.9, featured=True)
    make_room(palace, name="Suite", capacity=4, price=Decimal("900.00"))
    make_room(palace, name="Deluxe", capacity=2, price=Decimal("400.00"))

    budget = make_property(name="Budget Inn", city="Dubai Marina", amenities=["WiFi"], rating=3.8)
    make_room(budget, name="Single", capacity=1, price=Decimal("80.00"))

    riverside = make_property(name="Riverside", city="London", amenities=["wifi", "Pool"], rating=4.6)
    make_room(riverside, name="Twin", capacity=2, price=Decimal("180.00"))

    for prop in (palace, budget, riverside):
        store.add_property(prop)
    return {"palace": palace, "budget": budget, "riverside": riverside}


@pytest.fixture
def client(store):
    app.dependency_overrides[get_booking_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _names(response):
    return [p["name"] for p in response.json()["properties"]]


def test_list_orders_featured_then_rating(client, catalog):
    response = client.get(f"{API}/properties")

    assert response.status_code == 200
    assert _names(response) == ["Palace", "Riverside", "Budget Inn"]
    palace = response.json()["properties"][0]
    assert palace["room_count"] == 2
    assert palace["min_price"] == 400


def test_city_filter_is_case_insensitive_substring(client, catalog):
    assert _names(client.get(f"{API}/properties", params={"city": "dubai"})) == ["Palace", "Budget Inn"]


def test_room_filters_narrow_min_price(client, catalog):
    response = client.get(f"{API}/properties", params={"guests": 3})
    assert _names(response) == ["Palace"]
    assert response.json()["properties"][0]["min_price"] == 900

    cheap = client.get(f"{API}/properties", params={"max_price": 200})
    assert _names(cheap) == ["Riverside", "Budget Inn"]

    ranged = client.get(f"{API}/properties", params={"min_price": 100, "max_price": 500})
    assert _names(ranged) == ["Palace", "Riverside"]
    assert ranged.json()["properties"][0]["min_price"] == 400


def test_amenity_filter_requires_every_amenity(client, catalog):
    assert _names(client.get(f"{API}/properties", params={"amenities": "pool"})) == ["Palace", "Riverside"]
    assert _names(client.get(f"{API}/properties", params={"amenities": "Pool, WiFi"})) == ["Riverside"]
    assert _names(client.get(f"{API}/properties", params={"amenities": "Sauna"})) == []


def test_pagination(client, catalog):
    first = client.get(f"{API}/properties", params={"page": 1, "limit": 2}).json()
    assert [p["name"] for p in first["properties"]] == ["Palace", "Riverside"]
    assert first["pagination"] == {
        "page": 1,
        "limit": 2,
        "total_count": 3,
        "total_pages": 2,
        "has_next_page": True,
        "has_prev_page": False,
    }

    second = client.get(f"{API}/properties", params={"page": 2, "limit": 2}).json()
    assert [p["name"] for p in second["properties"]] == ["Budget Inn"]
    assert second["pagination"]["has_next_page"] is False
    assert second["pagination"]["has_prev_page"] is True

    assert client.get(f"{API}/properties", params={"page": 0}).status_code == 422


def test_property_detail_lists_rooms_cheapest_first(client, catalog):
    palace = catalog["palace"]

    response = client.get(f"{API}/properties/{palace.id}")

    assert response.status_code == 200
    rooms = [(room["name"], room["price"]) for room in response.json()["rooms"]]
    assert rooms == [("Deluxe", 400), ("Suite", 900)]

    missing = client.get(f"{API}/properties/{uuid.uuid4()}")
    assert missing.status_code == 404
    assert "not found" in missing.json()["detail"]


def test_room_detail_includes_property_summary(client, catalog):
    room = catalog["riverside"].rooms[0]

    response = client.get(f"{API}/rooms/{room.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["price"] == 180
    assert body["property"] == {
        "id": str(catalog["riverside"].id),
        "name": "Riverside",
        "city": "London",
        "country": "United Arab Emirates",
    }

    assert client.get(f"{API}/rooms/{uuid.uuid4()}").status_code == 404
