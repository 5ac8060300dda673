"""Property search and detail endpoints."""

import math
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_booking_store
from app.config import settings
from app.core.exceptions import NotFoundError
from app.models.property import Property
from app.repositories.base import BookingStore, PropertyFilters
from app.schemas.property import (
    Pagination,
    PropertyDetailResponse,
    PropertyListItem,
    PropertyListResponse,
    PropertyResponse,
)

router = APIRouter()


@router.get("", response_model=PropertyListResponse)
async def list_properties(
    store: Annotated[BookingStore, Depends(get_booking_store)],
    city: str | None = Query(default=None, max_length=100),
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    guests: int | None = Query(default=None, ge=1),
    amenities: str | None = Query(default=None, description="Comma separated"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
) -> PropertyListResponse:
    """Search properties, featured and best rated first."""
    filters = PropertyFilters(
        city=city.strip() if city else None,
        min_price=min_price,
        max_price=max_price,
        guests=guests,
        amenities=[a.strip() for a in amenities.split(",") if a.strip()] if amenities else [],
    )

    offset = (page - 1) * limit
    matches, total = await store.search_properties(filters, offset=offset, limit=limit)

    total_pages = math.ceil(total / limit)
    return PropertyListResponse(
        properties=[
            PropertyListItem(
                **PropertyResponse.model_validate(match.property).model_dump(),
                room_count=match.room_count,
                min_price=match.min_price,
            )
            for match in matches
        ],
        pagination=Pagination(
            page=page,
            limit=limit,
            total_count=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        ),
    )


@router.get("/{property_id}", response_model=PropertyDetailResponse)
async def get_property(
    property_id: UUID,
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> Property:
    """Get a property with its rooms."""
    prop = await store.get_property(property_id)
    if not prop:
        raise NotFoundError("Property", str(property_id))
    return prop
