"""Service for managing locations."""
from typing import List, Optional, Tuple

from sqlalchemy import select, func, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enum_utils import get_enum_value
from app.models.courier_rate import CourierRate
from app.models.location import Location, LocationType
from app.schemas.location import LocationCreate, LocationUpdate


class LocationService:
    """Service for location CRUD and lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ==================== LOCATION CRUD ====================

    async def get_location(self, location_id: int) -> Optional[Location]:
        """Get location by ID."""
        return await self.db.get(Location, location_id)

    async def get_location_by_code(self, code: str) -> Optional[Location]:
        """Get location by code."""
        stmt = select(Location).where(Location.code == code.strip().upper())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_locations(
        self,
        search: Optional[str] = None,
        country_code: Optional[str] = None,
        location_type: Optional[LocationType] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[Location], int]:
        """Get locations with filters, ordered by name."""
        stmt = select(Location).order_by(Location.name)

        filters = []
        if search:
            fragment = search.strip().lower()
            filters.append(or_(
                func.lower(Location.name).contains(fragment, autoescape=True),
                func.lower(Location.code).contains(fragment, autoescape=True),
                func.lower(Location.country).contains(fragment, autoescape=True),
                func.lower(Location.country_code).contains(fragment, autoescape=True),
            ))
        if country_code:
            filters.append(func.upper(Location.country_code) == country_code.strip().upper())
        if location_type:
            filters.append(Location.location_type == get_enum_value(location_type))
        if is_active is not None:
            filters.append(Location.is_active == is_active)

        if filters:
            stmt = stmt.where(and_(*filters))

        result = await self.db.execute(stmt)
        items = list(result.scalars().all())
        return items, len(items)

    async def get_seaports(self) -> List[Location]:
        items, _ = await self.get_locations(location_type=LocationType.SEA_PORT, is_active=True)
        return items

    async def get_airports(self) -> List[Location]:
        items, _ = await self.get_locations(location_type=LocationType.AIRPORT, is_active=True)
        return items

    async def get_country_codes(self) -> List[str]:
        """Distinct country codes, sorted."""
        stmt = select(Location.country_code).distinct().order_by(Location.country_code)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_location(self, data: LocationCreate) -> Location:
        """Create new location."""
        existing = await self.get_location_by_code(data.code)
        if existing:
            raise ValueError(f"Location with code {data.code} already exists")

        location = Location(
            code=data.code,
            name=data.name,
            country=data.country,
            country_code=data.country_code,
            location_type=get_enum_value(data.location_type),
            is_active=data.is_active,
        )
        self.db.add(location)
        await self.db.commit()
        await self.db.refresh(location)
        return location

    async def update_location(self, location_id: int, data: LocationUpdate) -> Location:
        """Update location."""
        location = await self.get_location(location_id)
        if not location:
            raise LookupError("Location not found")

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "code" in update_data and update_data["code"] != location.code:
            if await self.get_location_by_code(update_data["code"]):
                raise ValueError(f"Location with code {update_data['code']} already exists")
        if "location_type" in update_data:
            update_data["location_type"] = get_enum_value(update_data["location_type"])

        for key, value in update_data.items():
            setattr(location, key, value)

        await self.db.commit()
        await self.db.refresh(location)
        return location

    async def delete_location(self, location_id: int) -> bool:
        """Delete location that no rate references."""
        location = await self.get_location(location_id)
        if not location:
            raise LookupError("Location not found")

        in_use = await self.db.execute(
            select(func.count(CourierRate.id)).where(or_(
                CourierRate.origin_id == location_id,
                CourierRate.destination_id == location_id,
            ))
        )
        if (in_use.scalar() or 0) > 0:
            raise ValueError(f"Location {location.code} is referenced by courier rates")

        await self.db.delete(location)
        await self.db.commit()
        return True
