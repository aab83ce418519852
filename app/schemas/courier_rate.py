"""Pydantic schemas for courier rates (AIR, WATER/LCL, WATER/FCL)."""
from datetime import datetime, date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.enum_utils import (
    normalize_to_uppercase, VALID_SHIPPING_TYPES, VALID_SEA_FREIGHT_MODES,
)
from app.models.courier_rate import ShippingType, SeaFreightMode
from app.schemas.base import BaseResponseSchema, BaseCreateSchema, BaseUpdateSchema
from app.schemas.container_type import ContainerTypeBrief
from app.schemas.location import LocationBrief


# ============================================
# MODE PAYLOAD SCHEMAS
# ============================================

class AirFreightRateCreate(BaseModel):
    """Air pricing payload."""
    base_rate_per_kg: Decimal = Field(..., gt=0)
    minimum_charge: Optional[Decimal] = Field(default=None, ge=0)
    fuel_surcharge_rate: Optional[Decimal] = Field(default=None, ge=0, description="Fraction, 0.1 = 10%")
    security_surcharge: Optional[Decimal] = Field(default=None, ge=0)
    weight_limit_kg: Optional[Decimal] = Field(default=None, gt=0)


class AirFreightRateResponse(BaseResponseSchema):
    id: int
    base_rate_per_kg: Decimal
    minimum_charge: Optional[Decimal] = None
    fuel_surcharge_rate: Optional[Decimal] = None
    security_surcharge: Optional[Decimal] = None
    weight_limit_kg: Optional[Decimal] = None


class LCLFreightRateCreate(BaseModel):
    """LCL pricing payload."""
    base_rate_per_cbm: Decimal = Field(..., gt=0)
    documentation_fee: Optional[Decimal] = Field(default=None, ge=0)
    bunker_adjustment_rate: Optional[Decimal] = Field(default=None, ge=0)
    lcl_service_charge: Optional[Decimal] = Field(default=None, ge=0)


class LCLFreightRateResponse(BaseResponseSchema):
    id: int
    base_rate_per_cbm: Decimal
    documentation_fee: Optional[Decimal] = None
    bunker_adjustment_rate: Optional[Decimal] = None
    lcl_service_charge: Optional[Decimal] = None


class FCLFreightRateCreate(BaseModel):
    """FCL line item for one container type."""
    container_type_id: int
    base_rate_per_container: Decimal = Field(..., gt=0)
    documentation_fee: Optional[Decimal] = Field(default=None, ge=0)
    bunker_adjustment_rate: Optional[Decimal] = Field(default=None, ge=0)
    terminal_handling_charge: Optional[Decimal] = Field(default=None, ge=0)


class FCLFreightRateResponse(BaseResponseSchema):
    id: int
    container_type_id: int
    container_type: Optional[ContainerTypeBrief] = None
    base_rate_per_container: Decimal
    documentation_fee: Optional[Decimal] = None
    bunker_adjustment_rate: Optional[Decimal] = None
    terminal_handling_charge: Optional[Decimal] = None


# ============================================
# COURIER RATE SCHEMAS
# ============================================

class CourierRateCreate(BaseCreateSchema):
    """
    Create schema for courier rate.

    Exactly one of air_freight / lcl_freight / fcl_freight must be supplied,
    matching shipping_type and sea_freight_mode. That pairing and the date
    order are checked by the service so non-HTTP callers get the same rules.
    """
    courier_name: str = Field(..., min_length=1, max_length=100)
    origin_id: int
    destination_id: int
    shipping_type: ShippingType
    sea_freight_mode: Optional[SeaFreightMode] = None
    effective_from: date
    effective_to: date
    is_active: bool = True
    transit_days: Optional[int] = Field(default=None, ge=0)
    weight_limit_kg: Optional[Decimal] = Field(default=None, gt=0)
    dimension_limit: Optional[str] = Field(default=None, max_length=50, description="e.g. 100x100x100 cm")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    description: Optional[str] = None

    air_freight: Optional[AirFreightRateCreate] = None
    lcl_freight: Optional[LCLFreightRateCreate] = None
    fcl_freight: Optional[List[FCLFreightRateCreate]] = None

    @field_validator("shipping_type", mode="before")
    @classmethod
    def normalize_shipping_type(cls, v):
        return normalize_to_uppercase(v, VALID_SHIPPING_TYPES)

    @field_validator("sea_freight_mode", mode="before")
    @classmethod
    def normalize_sea_freight_mode(cls, v):
        return normalize_to_uppercase(v, VALID_SEA_FREIGHT_MODES)

    @field_validator("courier_name")
    @classmethod
    def strip_courier_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("courier_name cannot be blank")
        return v


class CourierRateUpdate(BaseUpdateSchema):
    """
    Update schema for courier rate.

    Courier, route and mode are fixed once created. A supplied fcl_freight
    list replaces the line items: matching container types are updated,
    new ones added, missing ones removed.
    """
    effective_from: Optional[date] = None
    effective_to: Optional[date] = None
    is_active: Optional[bool] = None
    transit_days: Optional[int] = Field(default=None, ge=0)
    weight_limit_kg: Optional[Decimal] = Field(default=None, gt=0)
    dimension_limit: Optional[str] = Field(default=None, max_length=50, description="e.g. 100x100x100 cm")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    description: Optional[str] = None

    air_freight: Optional[AirFreightRateCreate] = None
    lcl_freight: Optional[LCLFreightRateCreate] = None
    fcl_freight: Optional[List[FCLFreightRateCreate]] = None


class CourierRateResponse(BaseResponseSchema):
    """Response schema for courier rate."""
    id: int
    courier_name: str
    origin_id: int
    destination_id: int
    origin: Optional[LocationBrief] = None
    destination: Optional[LocationBrief] = None
    shipping_type: ShippingType
    sea_freight_mode: Optional[SeaFreightMode] = None
    effective_from: date
    effective_to: date
    is_active: bool
    transit_days: Optional[int] = None
    weight_limit_kg: Optional[Decimal] = None
    dimension_limit: Optional[str] = None
    currency: str
    description: Optional[str] = None
    air_freight_details: Optional[AirFreightRateResponse] = None
    lcl_freight_details: Optional[LCLFreightRateResponse] = None
    fcl_freight_details: List[FCLFreightRateResponse] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("fcl_freight_details", mode="before")
    @classmethod
    def fcl_lines_as_list(cls, v):
        # ORM side is keyed by container_type_id
        if isinstance(v, dict):
            return [v[key] for key in sorted(v)]
        return v or []


class CourierRateListResponse(BaseModel):
    """Paginated courier rate list."""
    items: List[CourierRateResponse]
    total: int
    page: int
    size: int
    pages: int


class CourierRateSearchCriteria(BaseModel):
    """Advanced search filters; every field is optional."""
    courier_name: Optional[str] = Field(default=None, description="Partial, case-insensitive")
    shipping_type: Optional[ShippingType] = None
    sea_freight_mode: Optional[SeaFreightMode] = None
    origin_id: Optional[int] = None
    destination_id: Optional[int] = None
    active_on_date: Optional[date] = None
    effective_from_after: Optional[date] = None
    effective_to_before: Optional[date] = None
    container_type_id: Optional[int] = None
    max_transit_days: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    currently_active: Optional[bool] = None

    sort_by: Literal[
        "id", "courier_name", "effective_from", "effective_to", "transit_days", "created_at"
    ] = "id"
    sort_direction: Literal["asc", "desc"] = "asc"
    page: int = Field(default=1, ge=1)
    size: int = Field(default=20, ge=1, le=100)

    @field_validator("shipping_type", mode="before")
    @classmethod
    def normalize_shipping_type(cls, v):
        return normalize_to_uppercase(v, VALID_SHIPPING_TYPES)

    @field_validator("sea_freight_mode", mode="before")
    @classmethod
    def normalize_sea_freight_mode(cls, v):
        return normalize_to_uppercase(v, VALID_SEA_FREIGHT_MODES)


class RateConflictErrorResponse(BaseModel):
    """409 body returned when a rate overlaps an existing one."""
    message: str
    conflicting_rate_id: int
    conflicting_effective_from: date
    conflicting_effective_to: date
    container_type_id: Optional[int] = None
    container_type_name: Optional[str] = None
    suggestion: str
