"""API dependencies for authentication, storage and services."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError
from app.core.security import verify_token
from app.database import get_db
from app.repositories.base import BookingStore
from app.repositories.sqlalchemy_store import SqlAlchemyBookingStore
from app.services.booking_service import BookingService, Requester

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_requester(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Requester:
    """Identity of the caller from the auth service's JWT."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials, token_type="access")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")
    try:
        return Requester(user_id=UUID(user_id), role=payload.get("role") or "user")
    except ValueError:
        raise AuthenticationError("Invalid token subject")


async def get_booking_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingStore:
    return SqlAlchemyBookingStore(db)


async def get_booking_service(
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> BookingService:
    return BookingService(store)
