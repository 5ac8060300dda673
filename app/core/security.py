"""JWT access tokens.

Tokens are issued by the external auth service; this API only verifies them.
``create_access_token`` exists for service-to-service calls and tests.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"


def create_access_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign ``claims`` (``sub`` and ``role``) as a short-lived access token."""
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {**claims, "exp": datetime.now(UTC) + lifetime, "type": ACCESS_TOKEN}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = ACCESS_TOKEN) -> dict[str, Any]:
    """Decode a token, rejecting bad signatures, expiry and the wrong type."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise AuthenticationError("Could not validate credentials")

    if payload.get("type") != token_type:
        raise AuthenticationError("Invalid token type")
    return payload
