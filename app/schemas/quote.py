"""Pydantic schemas for freight quote requests and results."""
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.enum_utils import (
    normalize_to_uppercase, VALID_SHIPPING_TYPES, VALID_SEA_FREIGHT_MODES,
)
from app.models.courier_rate import ShippingType, SeaFreightMode
from app.schemas.courier_rate import CourierRateResponse


class ShippingRequirement(BaseModel):
    """
    What the customer wants to ship.

    Omitted mode means every mode is quoted. container_count maps
    container_type_id -> number of containers and only applies to FCL.
    """
    origin_id: Optional[int] = None
    destination_id: Optional[int] = None
    shipping_type: Optional[ShippingType] = None
    sea_freight_mode: Optional[SeaFreightMode] = None
    shipping_date: Optional[date] = Field(default=None, description="Cargo ready date")
    number_of_packages: Optional[int] = Field(default=None, ge=1)
    gross_weight_kg: Optional[Decimal] = Field(default=None, ge=0)
    volume_cbm: Optional[Decimal] = Field(default=None, ge=0)
    container_count: Optional[Dict[int, int]] = None
    max_transit_days: Optional[int] = Field(default=None, ge=0)

    @field_validator("shipping_type", mode="before")
    @classmethod
    def normalize_shipping_type(cls, v):
        return normalize_to_uppercase(v, VALID_SHIPPING_TYPES)

    @field_validator("sea_freight_mode", mode="before")
    @classmethod
    def normalize_sea_freight_mode(cls, v):
        return normalize_to_uppercase(v, VALID_SEA_FREIGHT_MODES)

    @field_validator("container_count")
    @classmethod
    def validate_container_count(cls, v):
        if v is None:
            return v
        for container_type_id, count in v.items():
            if count < 0:
                raise ValueError(f"Container count for type {container_type_id} cannot be negative")
        return v


class QuoteResponse(CourierRateResponse):
    """A matched rate plus its computed amount. amount is None when not applicable."""
    pricing_model: Optional[str] = None
    chargeable_quantity: Optional[Decimal] = None
    amount: Optional[Decimal] = None


class QuoteListResponse(BaseModel):
    """Quotes ordered cheapest first, not-applicable last."""
    items: List[QuoteResponse]
    total: int
    requirement: ShippingRequirement
