"""HTTP middleware and per-endpoint rate limiting."""

import logging
import time

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

import redis.asyncio as redis

from app.config import settings
from app.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 1.0
RATE_WINDOW_SECONDS = 60
UNLIMITED_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})

_redis_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    """Shared Redis client for rate limiting, created on first use."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    return _redis_client


def client_ip(request: Request) -> str:
    # Behind a proxy/load balancer
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


async def hit_window(redis_client: redis.Redis, key: str, now: int) -> int:
    """Record a hit in a sliding one-minute window and return prior hits."""
    async with redis_client.pipeline(transaction=True) as pipe:
        await pipe.zremrangebyscore(key, 0, now - RATE_WINDOW_SECONDS)
        await pipe.zcard(key)
        await pipe.zadd(key, {str(time.time_ns()): now})
        await pipe.expire(key, RATE_WINDOW_SECONDS)
        results = await pipe.execute()
    return results[1]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP request cap across the whole API.

    Requests pass through unthrottled while Redis is unreachable.
    """

    def __init__(self, app, requests_per_minute: int = 100):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute

    def _limit_headers(self, remaining: int, now: int) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.requests_per_minute),
            "X-RateLimit-Remaining": str(max(0, remaining)),
            "X-RateLimit-Reset": str(now + RATE_WINDOW_SECONDS),
        }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in UNLIMITED_PATHS:
            return await call_next(request)

        now = int(time.time())
        try:
            hits = await hit_window(get_redis(), f"rate_limit:{client_ip(request)}", now)
        except redis.RedisError as e:
            logger.warning(f"Rate limiter unavailable: {e}")
            return await call_next(request)

        if hits >= self.requests_per_minute:
            return JSONResponse(
                status_code=429,
                content={
                    "detail": "Too many requests. Please try again later.",
                    "retry_after": RATE_WINDOW_SECONDS,
                },
                headers={"Retry-After": str(RATE_WINDOW_SECONDS), **self._limit_headers(0, now)},
            )

        response = await call_next(request)
        response.headers.update(self._limit_headers(self.requests_per_minute - hits - 1, now))
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each response with a request ID and its duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(time.time_ns())
        request.state.request_id = request_id

        response = await call_next(request)

        duration = time.perf_counter() - started
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        summary = (
            f"{request.method} {request.url.path} {response.status_code} "
            f"{duration:.3f}s (request_id={request_id})"
        )
        if duration > SLOW_REQUEST_SECONDS:
            logger.warning(f"Slow request: {summary}")
        else:
            logger.debug(summary)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if not settings.debug:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


class RateLimiter:
    """Tighter per-endpoint limit, used as a route dependency.

    Raises:
        RateLimitExceeded: once the caller exceeds ``requests_per_minute``
    """

    def __init__(self, requests_per_minute: int = 10, key_prefix: str = "api"):
        self.requests_per_minute = requests_per_minute
        self.key_prefix = key_prefix

    async def __call__(self, request: Request) -> None:
        key = f"rate:{self.key_prefix}:{client_ip(request)}"
        try:
            hits = await hit_window(get_redis(), key, int(time.time()))
        except redis.RedisError as e:
            logger.warning(f"Rate limiter unavailable for {self.key_prefix}: {e}")
            return

        if hits >= self.requests_per_minute:
            logger.info(f"Rate limit hit on {self.key_prefix} for {client_ip(request)}")
            raise RateLimitExceeded()


booking_limiter = RateLimiter(
    requests_per_minute=settings.booking_rate_limit_per_minute, key_prefix="booking"
)
