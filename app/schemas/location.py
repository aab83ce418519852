"""Pydantic schemas for locations."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.enum_utils import normalize_to_uppercase, VALID_LOCATION_TYPES
from app.models.location import LocationType
from app.schemas.base import BaseResponseSchema, BaseCreateSchema, BaseUpdateSchema


class LocationCreate(BaseCreateSchema):
    """Create schema for location."""
    code: str = Field(..., min_length=2, max_length=10)
    name: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    country_code: str = Field(..., min_length=2, max_length=3)
    location_type: LocationType
    is_active: bool = True

    @field_validator("location_type", mode="before")
    @classmethod
    def normalize_location_type(cls, v):
        return normalize_to_uppercase(v, VALID_LOCATION_TYPES)

    @field_validator("code", "country_code")
    @classmethod
    def uppercase_codes(cls, v: str) -> str:
        return v.strip().upper()


class LocationUpdate(BaseUpdateSchema):
    """Update schema for location."""
    code: Optional[str] = Field(default=None, min_length=2, max_length=10)
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    country: Optional[str] = Field(default=None, min_length=1, max_length=100)
    country_code: Optional[str] = Field(default=None, min_length=2, max_length=3)
    location_type: Optional[LocationType] = None
    is_active: Optional[bool] = None

    @field_validator("location_type", mode="before")
    @classmethod
    def normalize_location_type(cls, v):
        return normalize_to_uppercase(v, VALID_LOCATION_TYPES)

    @field_validator("code", "country_code")
    @classmethod
    def uppercase_codes(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class LocationResponse(BaseResponseSchema):
    """Response schema for location."""
    id: int
    code: str
    name: str
    country: str
    country_code: str
    location_type: LocationType
    is_active: bool
    created_at: datetime
    updated_at: datetime


class LocationBrief(BaseResponseSchema):
    """Location summary embedded in rate responses."""
    id: int
    code: str
    name: str
    country_code: str


class LocationListResponse(BaseModel):
    """Location list."""
    items: List[LocationResponse]
    total: int
