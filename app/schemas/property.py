"""Property and room Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PropertySummary(BaseModel):
    """Property fields embedded in room and booking responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    city: str
    country: str


class RoomResponse(BaseModel):
    """Schema for room response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    property_id: UUID
    name: str
    description: str | None
    room_type: str
    capacity: int
    price: float
    available: bool
    images: list[str] | None
    amenities: list[str] | None


class RoomWithPropertyResponse(RoomResponse):
    property: PropertySummary | None = None


class PropertyResponse(BaseModel):
    """Schema for property listing response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    address: str | None
    city: str
    country: str
    latitude: float | None
    longitude: float | None
    images: list[str] | None
    amenities: list[str] | None
    rating: float
    review_count: int
    featured: bool
    created_at: datetime | None
    updated_at: datetime | None


class PropertyListItem(PropertyResponse):
    room_count: int
    min_price: float | None


class PropertyDetailResponse(PropertyResponse):
    rooms: list[RoomResponse]


class Pagination(BaseModel):
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class PropertyListResponse(BaseModel):
    """Schema for paginated property list."""

    properties: list[PropertyListItem]
    pagination: Pagination
