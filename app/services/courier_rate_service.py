"""Service for managing courier rates through the conflict-checked write path."""
import logging
import zlib
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import select, func, text, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from app.config import settings
from app.core.enum_utils import get_enum_value
from app.core.exceptions import InvalidRateError, NotFoundError
from app.models.container_type import ContainerType
from app.models.courier_rate import (
    CourierRate, AirFreightRate, LCLFreightRate, FCLFreightRate,
    ShippingType, SeaFreightMode, courier_name_key,
)
from app.models.location import Location
from app.schemas.courier_rate import (
    CourierRateCreate, CourierRateUpdate, CourierRateSearchCriteria,
    AirFreightRateCreate, LCLFreightRateCreate, FCLFreightRateCreate,
)
from app.services.rate_conflict_service import RateConflictService
from app.services.rate_predicates import (
    RateIdentity, build_search_predicate, combine_with_and,
    has_shipping_type, has_sea_freight_mode, has_active_status, is_active_on_date,
)


logger = logging.getLogger(__name__)


class CourierRateService:
    """Service for courier rate CRUD, search and matching."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conflicts = RateConflictService(db)

    # ==================== READ ====================

    async def get_rate(self, rate_id: int, refresh: bool = False) -> Optional[CourierRate]:
        """Get rate by ID with its mode payload."""
        stmt = select(CourierRate).where(CourierRate.id == rate_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_rates(
        self,
        shipping_type: Optional[ShippingType] = None,
        sea_freight_mode: Optional[SeaFreightMode] = None,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[CourierRate], int]:
        """Get paginated rates with filters."""
        predicate = combine_with_and([
            has_shipping_type(shipping_type),
            has_sea_freight_mode(sea_freight_mode),
            has_active_status(is_active),
        ])
        return await self._paginate(predicate, CourierRate.id.asc(), skip, limit)

    async def get_active_rates(self, on_date: Optional[date] = None) -> List[CourierRate]:
        """Active rates effective on the date (default today)."""
        predicate = combine_with_and([
            has_active_status(True),
            is_active_on_date(on_date or date.today()),
        ])
        return await self.find_matching_rates(predicate)

    async def search_rates(
        self,
        criteria: CourierRateSearchCriteria
    ) -> Tuple[List[CourierRate], int]:
        """Advanced search with sorting and pagination."""
        column = getattr(CourierRate, criteria.sort_by)
        order = desc(column) if criteria.sort_direction == "desc" else asc(column)
        skip = (criteria.page - 1) * criteria.size
        return await self._paginate(
            build_search_predicate(criteria), order, skip, criteria.size
        )

    async def find_matching_rates(self, predicate: ColumnElement) -> List[CourierRate]:
        """All rates satisfying a predicate built from rate_predicates."""
        stmt = select(CourierRate).where(predicate).order_by(CourierRate.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _paginate(
        self,
        predicate: ColumnElement,
        order,
        skip: int,
        limit: int
    ) -> Tuple[List[CourierRate], int]:
        # Count
        count_stmt = select(func.count(CourierRate.id)).where(predicate)
        total = (await self.db.execute(count_stmt)).scalar() or 0

        # Paginate
        stmt = select(CourierRate).where(predicate).order_by(order).offset(skip).limit(limit)
        result = await self.db.execute(stmt)
        items = list(result.scalars().all())

        return items, total

    # ==================== WRITE ====================

    async def create_rate(self, data: CourierRateCreate) -> CourierRate:
        """
        Create a rate after checking it overlaps no existing rate.

        Raises:
            InvalidRateError: bad dates, mode/payload mismatch, unknown references.
            RateConflictError: an existing rate covers part of the period.
        """
        shipping_type = get_enum_value(data.shipping_type)
        sea_freight_mode = get_enum_value(data.sea_freight_mode)

        self._validate_dates(data.effective_from, data.effective_to)
        self._validate_payload(
            shipping_type, sea_freight_mode,
            data.air_freight, data.lcl_freight, data.fcl_freight,
        )
        container_type_ids = [line.container_type_id for line in data.fcl_freight or []]
        await self._validate_references(data.origin_id, data.destination_id, container_type_ids)

        identity = RateIdentity(
            courier_name=data.courier_name,
            origin_id=data.origin_id,
            destination_id=data.destination_id,
            shipping_type=shipping_type,
            sea_freight_mode=sea_freight_mode,
        )
        await self._lock_route(identity)
        await self.conflicts.ensure_no_conflict(
            identity, data.effective_from, data.effective_to, container_type_ids
        )

        rate = CourierRate(
            courier_name=data.courier_name,
            courier_name_key=courier_name_key(data.courier_name),
            origin_id=data.origin_id,
            destination_id=data.destination_id,
            shipping_type=shipping_type,
            sea_freight_mode=sea_freight_mode,
            effective_from=data.effective_from,
            effective_to=data.effective_to,
            is_active=data.is_active,
            transit_days=data.transit_days,
            weight_limit_kg=data.weight_limit_kg,
            dimension_limit=data.dimension_limit,
            currency=(data.currency or settings.DEFAULT_CURRENCY).upper(),
            description=data.description,
            air_freight_details=None,
            lcl_freight_details=None,
            fcl_freight_details={},
        )
        if data.air_freight:
            rate.air_freight_details = AirFreightRate(**data.air_freight.model_dump())
        if data.lcl_freight:
            rate.lcl_freight_details = LCLFreightRate(**data.lcl_freight.model_dump())
        for line in data.fcl_freight or []:
            rate.fcl_freight_details[line.container_type_id] = FCLFreightRate(**line.model_dump())

        self.db.add(rate)
        await self.db.commit()

        logger.info(
            f"Created courier rate {rate.id}: {rate.courier_name} "
            f"{rate.origin_id}->{rate.destination_id} {rate.shipping_type}/{rate.sea_freight_mode}"
        )
        return await self.get_rate(rate.id, refresh=True)

    async def update_rate(self, rate_id: int, data: CourierRateUpdate) -> CourierRate:
        """
        Partially update a rate. Identity fields never change, so the conflict
        check reuses the stored identity and excludes the rate itself.

        Raises:
            NotFoundError, InvalidRateError, RateConflictError
        """
        rate = await self.get_rate(rate_id)
        if not rate:
            raise NotFoundError(f"Courier rate {rate_id} not found", {"rate_id": rate_id})

        effective_from = data.effective_from or rate.effective_from
        effective_to = data.effective_to or rate.effective_to
        self._validate_dates(effective_from, effective_to)

        if data.air_freight and rate.shipping_type != ShippingType.AIR.value:
            raise InvalidRateError("air_freight can only be set on AIR rates")
        if data.lcl_freight and rate.sea_freight_mode != SeaFreightMode.LCL.value:
            raise InvalidRateError("lcl_freight can only be set on WATER/LCL rates")
        if data.fcl_freight is not None and rate.sea_freight_mode != SeaFreightMode.FCL.value:
            raise InvalidRateError("fcl_freight can only be set on WATER/FCL rates")

        if data.fcl_freight is not None:
            container_type_ids = [line.container_type_id for line in data.fcl_freight]
            self._validate_fcl_lines(data.fcl_freight)
            await self._validate_references(None, None, container_type_ids)
        else:
            container_type_ids = list(rate.fcl_freight_details.keys())

        identity = RateIdentity(
            courier_name=rate.courier_name,
            origin_id=rate.origin_id,
            destination_id=rate.destination_id,
            shipping_type=rate.shipping_type,
            sea_freight_mode=rate.sea_freight_mode,
        )
        await self._lock_route(identity)
        await self.conflicts.ensure_no_conflict(
            identity, effective_from, effective_to, container_type_ids,
            exclude_rate_id=rate.id,
        )

        update_data = data.model_dump(
            exclude_unset=True,
            exclude={"air_freight", "lcl_freight", "fcl_freight"},
        )
        for key, value in update_data.items():
            if value is None and key in ("effective_from", "effective_to", "is_active", "currency"):
                continue
            if key == "currency" and value:
                value = value.upper()
            setattr(rate, key, value)

        if data.air_freight:
            self._apply_payload(rate, "air_freight_details", AirFreightRate, data.air_freight)
        if data.lcl_freight:
            self._apply_payload(rate, "lcl_freight_details", LCLFreightRate, data.lcl_freight)
        if data.fcl_freight is not None:
            self._merge_fcl_lines(rate, data.fcl_freight)

        await self.db.commit()

        logger.info(f"Updated courier rate {rate.id}")
        return await self.get_rate(rate.id, refresh=True)

    async def delete_rate(self, rate_id: int, hard_delete: bool = False) -> bool:
        """Delete rate (soft delete by deactivating unless hard_delete)."""
        rate = await self.get_rate(rate_id)
        if not rate:
            raise NotFoundError(f"Courier rate {rate_id} not found", {"rate_id": rate_id})

        if hard_delete:
            await self.db.delete(rate)
        else:
            rate.is_active = False
        await self.db.commit()

        logger.info(f"Deleted courier rate {rate_id} (hard={hard_delete})")
        return True

    # ==================== HELPERS ====================

    @staticmethod
    def _apply_payload(rate: CourierRate, attribute: str, model, payload) -> None:
        current = getattr(rate, attribute)
        if current is None:
            setattr(rate, attribute, model(**payload.model_dump()))
            return
        for key, value in payload.model_dump().items():
            setattr(current, key, value)

    @staticmethod
    def _merge_fcl_lines(rate: CourierRate, lines: List[FCLFreightRateCreate]) -> None:
        """Keyed merge on container_type_id: update, add, drop missing."""
        incoming = {line.container_type_id: line for line in lines}

        for container_type_id in list(rate.fcl_freight_details.keys()):
            if container_type_id not in incoming:
                del rate.fcl_freight_details[container_type_id]

        for container_type_id, line in incoming.items():
            existing = rate.fcl_freight_details.get(container_type_id)
            if existing is None:
                rate.fcl_freight_details[container_type_id] = FCLFreightRate(**line.model_dump())
            else:
                for key, value in line.model_dump().items():
                    setattr(existing, key, value)

    @staticmethod
    def _validate_dates(effective_from: Optional[date], effective_to: Optional[date]) -> None:
        if effective_from is None or effective_to is None:
            raise InvalidRateError("effective_from and effective_to are required")
        if effective_from > effective_to:
            raise InvalidRateError(
                "effective_from must be on or before effective_to",
                {"effective_from": effective_from.isoformat(), "effective_to": effective_to.isoformat()},
            )

    @classmethod
    def _validate_payload(
        cls,
        shipping_type: str,
        sea_freight_mode: Optional[str],
        air_freight: Optional[AirFreightRateCreate],
        lcl_freight: Optional[LCLFreightRateCreate],
        fcl_freight: Optional[List[FCLFreightRateCreate]],
    ) -> None:
        """Exactly one payload, and it must be the one the tags name."""
        if shipping_type == ShippingType.AIR.value:
            if sea_freight_mode is not None:
                raise InvalidRateError("sea_freight_mode must be empty for AIR rates")
            if air_freight is None or lcl_freight is not None or fcl_freight:
                raise InvalidRateError("AIR rates require air_freight and no sea payload")
        elif shipping_type == ShippingType.WATER.value:
            if sea_freight_mode == SeaFreightMode.LCL.value:
                if lcl_freight is None or air_freight is not None or fcl_freight:
                    raise InvalidRateError("WATER/LCL rates require lcl_freight only")
            elif sea_freight_mode == SeaFreightMode.FCL.value:
                if not fcl_freight or air_freight is not None or lcl_freight is not None:
                    raise InvalidRateError("WATER/FCL rates require at least one fcl_freight line only")
                cls._validate_fcl_lines(fcl_freight)
            else:
                raise InvalidRateError("sea_freight_mode (FCL or LCL) is required for WATER rates")
        else:
            raise InvalidRateError(f"Unknown shipping_type {shipping_type!r}")

    @staticmethod
    def _validate_fcl_lines(lines: List[FCLFreightRateCreate]) -> None:
        if not lines:
            raise InvalidRateError("WATER/FCL rates require at least one fcl_freight line")
        seen = set()
        for line in lines:
            if line.container_type_id in seen:
                raise InvalidRateError(
                    f"Duplicate FCL line for container type {line.container_type_id}",
                    {"container_type_id": line.container_type_id},
                )
            seen.add(line.container_type_id)

    async def _validate_references(
        self,
        origin_id: Optional[int],
        destination_id: Optional[int],
        container_type_ids: List[int],
    ) -> None:
        for label, location_id in (("origin", origin_id), ("destination", destination_id)):
            if location_id is not None and await self.db.get(Location, location_id) is None:
                raise InvalidRateError(
                    f"Unknown {label} location {location_id}",
                    {f"{label}_id": location_id},
                )

        if container_type_ids:
            result = await self.db.execute(
                select(ContainerType.id).where(ContainerType.id.in_(container_type_ids))
            )
            missing = set(container_type_ids) - set(result.scalars().all())
            if missing:
                raise InvalidRateError(
                    f"Unknown container types: {sorted(missing)}",
                    {"container_type_ids": sorted(missing)},
                )

    async def _lock_route(self, identity: RateIdentity) -> None:
        """Serialize writers for one courier/route/mode until commit (PostgreSQL only)."""
        if self.db.get_bind().dialect.name != "postgresql":
            return
        key = "|".join([
            courier_name_key(identity.courier_name),
            str(identity.origin_id),
            str(identity.destination_id),
            identity.shipping_type,
            identity.sea_freight_mode or "",
        ])
        await self.db.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": zlib.crc32(key.encode("utf-8"))},
        )
