"""Service for managing container types and container-based weight helpers."""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.container_type import ContainerType
from app.models.courier_rate import FCLFreightRate
from app.schemas.container_type import ContainerTypeCreate, ContainerTypeUpdate
from app.services.chargeable_measure import (
    AIR_VOLUMETRIC_FACTOR, to_decimal,
)


class ContainerTypeService:
    """Service for container type CRUD, search and sizing."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ==================== CONTAINER TYPE CRUD ====================

    async def get_container_type(self, container_type_id: int) -> Optional[ContainerType]:
        """Get container type by ID."""
        return await self.db.get(ContainerType, container_type_id)

    async def get_container_type_by_code(self, code: str) -> Optional[ContainerType]:
        """Get container type by code."""
        stmt = select(ContainerType).where(ContainerType.code == code.strip().upper())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_container_types(self, active_only: bool = True) -> List[ContainerType]:
        """Container types, smallest volume first."""
        stmt = select(ContainerType).order_by(ContainerType.volume_cbm, ContainerType.code)
        if active_only:
            stmt = stmt.where(ContainerType.is_active == True)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def search_container_types(self, term: str) -> List[ContainerType]:
        """Case-insensitive partial match on name, code or description."""
        fragment = term.strip().lower()
        stmt = (
            select(ContainerType)
            .where(or_(
                func.lower(ContainerType.name).contains(fragment, autoescape=True),
                func.lower(ContainerType.code).contains(fragment, autoescape=True),
                func.lower(ContainerType.description).contains(fragment, autoescape=True),
            ))
            .order_by(ContainerType.volume_cbm, ContainerType.code)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_suitable_containers(
        self,
        weight_kg: Decimal,
        volume_cbm: Decimal
    ) -> List[ContainerType]:
        """Active containers with enough payload and volume, smallest first."""
        stmt = (
            select(ContainerType)
            .where(
                ContainerType.is_active == True,
                ContainerType.max_payload_kg >= weight_kg,
                ContainerType.volume_cbm >= volume_cbm,
            )
            .order_by(ContainerType.volume_cbm, ContainerType.code)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_container_type(self, data: ContainerTypeCreate) -> ContainerType:
        """Create new container type; volume and payload are derived."""
        existing = await self.get_container_type_by_code(data.code)
        if existing:
            raise ValueError(f"Container type with code {data.code} already exists")
        self._validate_weights(data.max_gross_weight_kg, data.tare_weight_kg)

        container_type = ContainerType(**data.model_dump())
        container_type.apply_derived_values()
        self.db.add(container_type)
        await self.db.commit()
        await self.db.refresh(container_type)
        return container_type

    async def update_container_type(
        self,
        container_type_id: int,
        data: ContainerTypeUpdate
    ) -> ContainerType:
        """Update container type and recompute derived values."""
        container_type = await self.get_container_type(container_type_id)
        if not container_type:
            raise LookupError("Container type not found")

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "code" in update_data and update_data["code"] != container_type.code:
            if await self.get_container_type_by_code(update_data["code"]):
                raise ValueError(f"Container type with code {update_data['code']} already exists")

        for key, value in update_data.items():
            setattr(container_type, key, value)
        self._validate_weights(container_type.max_gross_weight_kg, container_type.tare_weight_kg)
        container_type.apply_derived_values()

        await self.db.commit()
        await self.db.refresh(container_type)
        return container_type

    async def delete_container_type(self, container_type_id: int) -> bool:
        """Delete container type that no FCL rate references."""
        container_type = await self.get_container_type(container_type_id)
        if not container_type:
            raise LookupError("Container type not found")

        in_use = await self.db.execute(
            select(func.count(FCLFreightRate.id))
            .where(FCLFreightRate.container_type_id == container_type_id)
        )
        if (in_use.scalar() or 0) > 0:
            raise ValueError(f"Container type {container_type.code} is referenced by FCL rates")

        await self.db.delete(container_type)
        await self.db.commit()
        return True

    # ==================== WEIGHT HELPERS ====================

    @staticmethod
    def calculate_volume_weight(
        volume_cbm: Decimal,
        factor: Decimal = AIR_VOLUMETRIC_FACTOR
    ) -> Decimal:
        """Volume weight in kg (volume x factor)."""
        return to_decimal(volume_cbm) * to_decimal(factor)

    @classmethod
    def calculate_chargeable_weight(
        cls,
        gross_weight_kg: Optional[Decimal],
        volume_cbm: Optional[Decimal],
        factor: Decimal = AIR_VOLUMETRIC_FACTOR
    ) -> Decimal:
        """Greater of gross and volume weight; either side may be omitted."""
        if gross_weight_kg is None and volume_cbm is None:
            raise ValueError("Either gross_weight_kg or volume_cbm is required")
        if volume_cbm is None:
            return to_decimal(gross_weight_kg)
        volume_weight = cls.calculate_volume_weight(volume_cbm, factor)
        if gross_weight_kg is None:
            return volume_weight
        return max(to_decimal(gross_weight_kg), volume_weight)

    @staticmethod
    def _validate_weights(max_gross_weight_kg: Decimal, tare_weight_kg: Decimal) -> None:
        if to_decimal(tare_weight_kg) >= to_decimal(max_gross_weight_kg):
            raise ValueError("tare_weight_kg must be less than max_gross_weight_kg")
