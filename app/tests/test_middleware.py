from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis
from fastapi.testclient import TestClient

from app.core import middleware
from app.core.exceptions import RateLimitExceeded
from app.main import app
from app.tests.conftest import run


def _request(ip: str = "10.0.0.1", forwarded: str | None = None) -> MagicMock:
    request = MagicMock()
    request.headers = {"X-Forwarded-For": forwarded} if forwarded else {}
    request.client.host = ip
    return request


def test_client_ip_prefers_forwarded_header():
    assert middleware.client_ip(_request(forwarded="203.0.113.7, 10.0.0.2")) == "203.0.113.7"
    assert middleware.client_ip(_request()) == "10.0.0.1"


def test_booking_limiter_rejects_over_limit(monkeypatch):
    limiter = middleware.RateLimiter(requests_per_minute=3, key_prefix="booking")
    monkeypatch.setattr(middleware, "get_redis", MagicMock())

    monkeypatch.setattr(middleware, "hit_window", AsyncMock(return_value=2))
    run(limiter(_request()))

    monkeypatch.setattr(middleware, "hit_window", AsyncMock(return_value=3))
    with pytest.raises(RateLimitExceeded):
        run(limiter(_request()))


def test_booking_limiter_fails_open_without_redis(monkeypatch):
    limiter = middleware.RateLimiter(requests_per_minute=1)
    monkeypatch.setattr(middleware, "get_redis", MagicMock())
    monkeypatch.setattr(
        middleware, "hit_window", AsyncMock(side_effect=redis.ConnectionError("down"))
    )

    assert run(limiter(_request())) is None


def test_responses_carry_request_id_and_security_headers():
    client = TestClient(app)

    response = client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"] == "req-42"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Response-Time"].endswith("s")
