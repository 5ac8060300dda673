from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_booking_service, get_booking_store
from app.core.middleware import booking_limiter
from app.core.security import create_access_token
from app.main import app
from app.services.booking_service import BookingService
from app.tests.conftest import TODAY

API = "/api/v1"


def _auth(user_id: uuid.UUID, role: str = "user") -> dict[str, str]:
    token = create_access_token({"sub": str(user_id), "role": role})
    return {"Authorization": f"Bearer {token}"}


async def _no_rate_limit():
    return None


@pytest.fixture
def client(store):
    app.dependency_overrides[get_booking_store] = lambda: store
    app.dependency_overrides[get_booking_service] = lambda: BookingService(store, today=lambda: TODAY)
    app.dependency_overrides[booking_limiter] = _no_rate_limit
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client, room, user_id, check_in, check_out, guests=2, **extra):
    return client.post(
        f"{API}/bookings",
        json={
            "room_id": str(room.id),
            "check_in": check_in,
            "check_out": check_out,
            "guests": guests,
            **extra,
        },
        headers=_auth(user_id),
    )


def test_check_availability_is_public_and_quotes_price(client, room):
    response = client.post(
        f"{API}/bookings/check-availability",
        json={"room_id": str(room.id), "check_in": "2026-03-01", "check_out": "2026-03-05"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["available"] is True
    assert body["price_per_night"] == 250
    assert body["nights"] == 4
    assert body["total_price"] == 1000
    assert body["conflicting_dates"] is None


def test_check_availability_returns_conflicting_dates(client, room):
    user_id = uuid.uuid4()
    assert _create(client, room, user_id, "2026-03-01", "2026-03-05").status_code == 201

    response = client.post(
        f"{API}/bookings/check-availability",
        json={"room_id": str(room.id), "check_in": "2026-03-03", "check_out": "2026-03-08"},
    )

    body = response.json()
    assert body["available"] is False
    assert body["conflicting_dates"] == {"check_in": "2026-03-01", "check_out": "2026-03-05"}
    assert body["total_price"] is None


def test_check_availability_input_errors(client, room):
    bad_date = client.post(
        f"{API}/bookings/check-availability",
        json={"room_id": str(room.id), "check_in": "soon", "check_out": "2026-03-05"},
    )
    assert bad_date.status_code == 422

    reversed_dates = client.post(
        f"{API}/bookings/check-availability",
        json={"room_id": str(room.id), "check_in": "2026-03-05", "check_out": "2026-03-01"},
    )
    assert reversed_dates.status_code == 422
    assert reversed_dates.json()["detail"] == "Check-out date must be after check-in date"

    missing_room = client.post(
        f"{API}/bookings/check-availability",
        json={"room_id": str(uuid.uuid4()), "check_in": "2026-03-01", "check_out": "2026-03-05"},
    )
    assert missing_room.status_code == 404


def test_create_booking_requires_authentication(client, room):
    response = client.post(
        f"{API}/bookings",
        json={"room_id": str(room.id), "check_in": "2026-03-01", "check_out": "2026-03-05", "guests": 1},
    )
    assert response.status_code == 401

    garbage = client.post(
        f"{API}/bookings",
        json={"room_id": str(room.id), "check_in": "2026-03-01", "check_out": "2026-03-05", "guests": 1},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert garbage.status_code == 401

    expired_token = create_access_token({"sub": str(uuid.uuid4())}, expires_delta=timedelta(minutes=-1))
    expired = client.get(f"{API}/bookings", headers={"Authorization": f"Bearer {expired_token}"})
    assert expired.status_code == 401
    assert expired.json()["detail"] == "Token has expired"


def test_create_booking_flow(client, room):
    user_id = uuid.uuid4()

    created = _create(client, room, user_id, "2026-03-01", "2026-03-05", special_requests="Quiet room")
    assert created.status_code == 201
    booking = created.json()
    assert booking["total_price"] == 1000
    assert booking["status"] == "pending"
    assert booking["payment_status"] == "pending"
    assert booking["nights"] == 4
    assert booking["user_id"] == str(user_id)
    assert booking["special_requests"] == "Quiet room"
    assert booking["room"]["property"]["city"] == "Dubai"

    overlap = _create(client, room, uuid.uuid4(), "2026-03-04", "2026-03-06")
    assert overlap.status_code == 409
    assert overlap.json()["detail"] == "Room is not available for the selected dates"

    assert _create(client, room, uuid.uuid4(), "2026-03-05", "2026-03-07").status_code == 201


def test_create_booking_validation_errors(client, room):
    user_id = uuid.uuid4()

    too_many = _create(client, room, user_id, "2026-03-01", "2026-03-02", guests=3)
    assert too_many.status_code == 422
    assert too_many.json()["detail"] == "Room capacity is 2 guests"

    past = _create(client, room, user_id, "2026-01-31", "2026-02-02")
    assert past.status_code == 422
    assert past.json()["detail"] == "Check-in date cannot be in the past"

    room.available = False
    disabled = _create(client, room, user_id, "2026-03-01", "2026-03-02")
    assert disabled.status_code == 409


def test_cancel_booking_via_patch(client, room):
    owner = uuid.uuid4()
    booking_id = _create(client, room, owner, "2026-03-01", "2026-03-05").json()["id"]

    stranger = client.patch(
        f"{API}/bookings/{booking_id}", json={"status": "cancelled"}, headers=_auth(uuid.uuid4())
    )
    assert stranger.status_code == 403

    wrong_target = client.patch(
        f"{API}/bookings/{booking_id}", json={"status": "confirmed"}, headers=_auth(owner)
    )
    assert wrong_target.status_code == 422
    assert wrong_target.json()["detail"] == "Only cancellation is allowed"

    cancelled = client.patch(
        f"{API}/bookings/{booking_id}", json={"status": "cancelled"}, headers=_auth(owner)
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert cancelled.json()["cancelled_at"] is not None

    again = client.patch(
        f"{API}/bookings/{booking_id}", json={"status": "cancelled"}, headers=_auth(owner)
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "Booking is already cancelled"

    assert _create(client, room, uuid.uuid4(), "2026-03-02", "2026-03-03").status_code == 201


def test_admin_can_cancel_any_booking(client, room):
    booking_id = _create(client, room, uuid.uuid4(), "2026-03-01", "2026-03-05").json()["id"]

    response = client.patch(
        f"{API}/bookings/{booking_id}",
        json={"status": "cancelled", "reason": "Overbooked by phone"},
        headers=_auth(uuid.uuid4(), role="admin"),
    )

    assert response.status_code == 200
    assert response.json()["cancellation_reason"] == "Overbooked by phone"


def test_list_and_get_bookings(client, room):
    owner = uuid.uuid4()
    first = _create(client, room, owner, "2026-03-01", "2026-03-02").json()
    _create(client, room, uuid.uuid4(), "2026-03-10", "2026-03-12")

    listed = client.get(f"{API}/bookings", headers=_auth(owner))
    assert listed.status_code == 200
    assert [b["id"] for b in listed.json()["bookings"]] == [first["id"]]

    detail = client.get(f"{API}/bookings/{first['id']}", headers=_auth(owner))
    assert detail.status_code == 200
    assert detail.json()["check_in"] == "2026-03-01"

    forbidden = client.get(f"{API}/bookings/{first['id']}", headers=_auth(uuid.uuid4()))
    assert forbidden.status_code == 403

    missing = client.get(f"{API}/bookings/{uuid.uuid4()}", headers=_auth(owner))
    assert missing.status_code == 404
