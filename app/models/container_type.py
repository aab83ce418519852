"""Container type model for full-container-load (FCL) pricing."""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Boolean, DateTime, Integer, Text, Numeric, event
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class ContainerType(Base):
    """
    Standard shipping container (20GP, 40HC, ...).

    Internal volume and payload are derived from the dimensions and weights
    whenever the row is written.
    """
    __tablename__ = "container_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    code: Mapped[str] = mapped_column(
        String(10),
        unique=True,
        nullable=False,
        index=True,
        comment="Container code e.g., 20GP, 40HC"
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Internal dimensions (meters)
    length_m: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    width_m: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    height_m: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)

    # Weights (kg)
    max_gross_weight_kg: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    tare_weight_kg: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Derived
    volume_cbm: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 3),
        nullable=True,
        comment="length x width x height"
    )
    max_payload_kg: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="max gross weight - tare weight"
    )

    is_refrigerated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

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

    def apply_derived_values(self) -> None:
        if self.length_m is not None and self.width_m is not None and self.height_m is not None:
            self.volume_cbm = (
                Decimal(str(self.length_m)) * Decimal(str(self.width_m)) * Decimal(str(self.height_m))
            ).quantize(Decimal("0.001"))
        if self.max_gross_weight_kg is not None and self.tare_weight_kg is not None:
            self.max_payload_kg = (
                Decimal(str(self.max_gross_weight_kg)) - Decimal(str(self.tare_weight_kg))
            )

    def __repr__(self) -> str:
        return f"<ContainerType(code='{self.code}')>"


@event.listens_for(ContainerType, "before_insert")
@event.listens_for(ContainerType, "before_update")
def _derive_container_values(mapper, connection, target: ContainerType) -> None:
    target.apply_derived_values()
