"""Location model: seaports, airports and inland points that rates run between."""
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import String, Boolean, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class LocationType(str, Enum):
    """Kind of shipping point."""
    SEA_PORT = "SEA_PORT"
    AIRPORT = "AIRPORT"
    CITY = "CITY"
    INLAND_PORT = "INLAND_PORT"


class Location(Base):
    """
    Origin/destination point referenced by courier rates.
    Codes follow the SHP_/AIR_ prefix convention, e.g. SHP_USNY, AIR_INDEL.
    """
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    code: Mapped[str] = mapped_column(
        String(10),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique location code e.g., SHP_USNY"
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    country_code: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
        index=True,
        comment="ISO country code"
    )
    location_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="SEA_PORT, AIRPORT, CITY, INLAND_PORT"
    )

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

    def __repr__(self) -> str:
        return f"<Location(code='{self.code}', type='{self.location_type}')>"
