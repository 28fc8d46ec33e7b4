"""Search schemas: the validated search input and the ranked results"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from app.utils.constants import (
    MAX_BUSINESS_TYPE_LENGTH,
    MAX_CITY_LENGTH,
    MAX_RADIUS_KM,
    MIN_RADIUS_KM,
)
from app.utils.errors import InvalidArgumentError


class SearchRequest(BaseModel):
    """Business search input.

    Accepts both snake_case and the camelCase names used by the web client
    (``businessType``, ``radiusKm``).
    """
    city: str = Field(..., max_length=MAX_CITY_LENGTH)
    business_type: str = Field(
        ...,
        max_length=MAX_BUSINESS_TYPE_LENGTH,
        validation_alias=AliasChoices("business_type", "businessType"),
    )
    radius_km: float = Field(
        default=5,
        ge=MIN_RADIUS_KM,
        le=MAX_RADIUS_KM,
        validation_alias=AliasChoices("radius_km", "radiusKm"),
        description=f"Search radius in kilometres ({MIN_RADIUS_KM}-{MAX_RADIUS_KM})",
    )

    @field_validator("city", "business_type")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


def parse_search_request(payload: Mapping[str, Any]) -> SearchRequest:
    """Validate an untyped search payload, raising InvalidArgumentError on bad input."""
    try:
        return SearchRequest.model_validate(dict(payload))
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        message = first["msg"].removeprefix("Value error, ")
        raise InvalidArgumentError(f"{field}: {message}" if field else message)


class SearchCenter(BaseModel):
    lat: float
    lng: float


class BusinessResultSchema(BaseModel):
    """A ranked business"""
    place_id: str | None = None
    name: str
    address: str | None = None
    rating: float | None = None
    total_reviews: int = 0
    lat: float
    lng: float
    phone: str | None = None
    website: str | None = None
    operational_status: str | None = None
    distance_km: float

    class Config:
        from_attributes = True


class SearchResponse(BaseModel):
    """Search endpoint response"""
    businesses: list[BusinessResultSchema]
    search_center: SearchCenter
    message: str
    remaining_searches: int
    total_results: int
    from_cache: bool = False


class SearchHistoryItem(BaseModel):
    """A past search, without its results"""
    id: int
    city: str
    business_type: str
    radius_km: float
    results_count: int
    center_lat: float
    center_lng: float
    created_at: datetime

    class Config:
        from_attributes = True


class BusinessTypeOption(BaseModel):
    value: str
    label: str
