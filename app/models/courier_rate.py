"""Courier rate models: one rate per courier/route/mode with exactly one mode payload."""
from datetime import datetime, date, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional, Dict

from sqlalchemy import (
    String, Boolean, DateTime, Date, ForeignKey, Integer, Text,
    Numeric, UniqueConstraint, CheckConstraint, Index, event
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.orm.collections import attribute_keyed_dict

from app.database import Base

if TYPE_CHECKING:
    from app.models.location import Location
    from app.models.container_type import ContainerType


# ============================================
# ENUMS
# ============================================

class ShippingType(str, Enum):
    """Top-level shipping mode."""
    AIR = "AIR"
    WATER = "WATER"


class SeaFreightMode(str, Enum):
    """Sea freight sub-mode, only meaningful when shipping type is WATER."""
    FCL = "FCL"  # Full Container Load
    LCL = "LCL"  # Less than Container Load


# ============================================
# COURIER RATE
# ============================================

def courier_name_key(courier_name: Optional[str]) -> str:
    """Comparison key for courier names: trimmed and Unicode casefolded."""
    return (courier_name or "").strip().casefold()


class CourierRate(Base):
    """
    A courier's offering for an origin/destination/mode combination.

    Tagged variant: shipping_type (+ sea_freight_mode for WATER) selects which
    single payload is populated: air_freight_details, lcl_freight_details, or
    the fcl_freight_details mapping of container_type_id -> line item.
    """
    __tablename__ = "courier_rates"
    __table_args__ = (
        CheckConstraint("effective_from <= effective_to", name="ck_courier_rate_dates"),
        Index(
            "idx_courier_rate_route",
            "origin_id", "destination_id", "shipping_type", "sea_freight_mode"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    courier_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # casefolded courier_name; rates compete when their keys are equal
    courier_name_key: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Route
    origin_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("locations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    destination_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("locations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    # Mode tags
    shipping_type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="AIR, WATER"
    )
    sea_freight_mode: Mapped[Optional[str]] = mapped_column(
        String(10),
        nullable=True,
        comment="FCL, LCL (WATER only)"
    )

    # Validity Period (inclusive on both ends)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date] = mapped_column(Date, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    transit_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    weight_limit_kg: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    dimension_limit: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="e.g. 100x100x100 cm"
    )
    currency: Mapped[str] = mapped_column(String(3), default="INR", nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    origin: Mapped["Location"] = relationship(
        "Location",
        foreign_keys=[origin_id],
        lazy="selectin"
    )
    destination: Mapped["Location"] = relationship(
        "Location",
        foreign_keys=[destination_id],
        lazy="selectin"
    )
    air_freight_details: Mapped[Optional["AirFreightRate"]] = relationship(
        "AirFreightRate",
        back_populates="courier_rate",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    lcl_freight_details: Mapped[Optional["LCLFreightRate"]] = relationship(
        "LCLFreightRate",
        back_populates="courier_rate",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    fcl_freight_details: Mapped[Dict[int, "FCLFreightRate"]] = relationship(
        "FCLFreightRate",
        back_populates="courier_rate",
        collection_class=attribute_keyed_dict("container_type_id"),
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return (
            f"<CourierRate(id={self.id}, courier='{self.courier_name}', "
            f"mode='{self.shipping_type}/{self.sea_freight_mode}')>"
        )


@event.listens_for(CourierRate, "before_insert")
@event.listens_for(CourierRate, "before_update")
def _set_courier_name_key(mapper, connection, target: CourierRate) -> None:
    target.courier_name_key = courier_name_key(target.courier_name)


# ============================================
# MODE PAYLOADS
# ============================================

class AirFreightRate(Base):
    """Per-kg air pricing with minimum charge and surcharges."""
    __tablename__ = "air_freight_rates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    courier_rate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courier_rates.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )

    base_rate_per_kg: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    minimum_charge: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    fuel_surcharge_rate: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(6, 4),
        nullable=True,
        comment="Fraction, e.g. 0.1 for 10%"
    )
    security_surcharge: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    weight_limit_kg: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    courier_rate: Mapped["CourierRate"] = relationship(
        "CourierRate",
        back_populates="air_freight_details"
    )


class LCLFreightRate(Base):
    """Per-cbm sea pricing for shared containers."""
    __tablename__ = "lcl_freight_rates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    courier_rate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courier_rates.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )

    base_rate_per_cbm: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    documentation_fee: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    bunker_adjustment_rate: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(6, 4),
        nullable=True,
        comment="Fraction applied to the running total"
    )
    lcl_service_charge: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    courier_rate: Mapped["CourierRate"] = relationship(
        "CourierRate",
        back_populates="lcl_freight_details"
    )


class FCLFreightRate(Base):
    """Per-container line item of an FCL rate. One per container type per rate."""
    __tablename__ = "fcl_freight_rates"
    __table_args__ = (
        UniqueConstraint(
            "courier_rate_id", "container_type_id",
            name="uq_fcl_rate_container_type"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    courier_rate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courier_rates.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    container_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("container_types.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    base_rate_per_container: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    documentation_fee: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    bunker_adjustment_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(6, 4), nullable=True)
    terminal_handling_charge: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    courier_rate: Mapped["CourierRate"] = relationship(
        "CourierRate",
        back_populates="fcl_freight_details"
    )
    container_type: Mapped["ContainerType"] = relationship(
        "ContainerType",
        lazy="selectin"
    )
