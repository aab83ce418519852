"""Pydantic schemas for container types."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.base import BaseResponseSchema, BaseCreateSchema, BaseUpdateSchema


class ContainerTypeCreate(BaseCreateSchema):
    """
    Create schema for container type.

    volume_cbm and max_payload_kg are derived server-side and not accepted.
    """
    code: str = Field(..., min_length=2, max_length=10)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    length_m: Decimal = Field(..., gt=0)
    width_m: Decimal = Field(..., gt=0)
    height_m: Decimal = Field(..., gt=0)
    max_gross_weight_kg: Decimal = Field(..., gt=0)
    tare_weight_kg: Decimal = Field(..., gt=0)
    is_refrigerated: bool = False
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def uppercase_code(cls, v: str) -> str:
        return v.strip().upper()


class ContainerTypeUpdate(BaseUpdateSchema):
    """Update schema for container type."""
    code: Optional[str] = Field(default=None, min_length=2, max_length=10)
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    length_m: Optional[Decimal] = Field(default=None, gt=0)
    width_m: Optional[Decimal] = Field(default=None, gt=0)
    height_m: Optional[Decimal] = Field(default=None, gt=0)
    max_gross_weight_kg: Optional[Decimal] = Field(default=None, gt=0)
    tare_weight_kg: Optional[Decimal] = Field(default=None, gt=0)
    is_refrigerated: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("code")
    @classmethod
    def uppercase_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class ContainerTypeResponse(BaseResponseSchema):
    """Response schema for container type."""
    id: int
    code: str
    name: str
    description: Optional[str] = None
    length_m: Decimal
    width_m: Decimal
    height_m: Decimal
    volume_cbm: Optional[Decimal] = None
    max_gross_weight_kg: Decimal
    tare_weight_kg: Decimal
    max_payload_kg: Optional[Decimal] = None
    is_refrigerated: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ContainerTypeListResponse(BaseModel):
    """Container type list."""
    items: List[ContainerTypeResponse]
    total: int


class WeightCalculationResponse(BaseModel):
    """Volume weight / chargeable weight helper result."""
    volume_cbm: Optional[Decimal] = None
    gross_weight_kg: Optional[Decimal] = None
    volume_weight_kg: Optional[Decimal] = None
    chargeable_weight_kg: Decimal


class ContainerTypeBrief(BaseResponseSchema):
    """Container type summary embedded in FCL line items."""
    id: int
    code: str
    name: str
