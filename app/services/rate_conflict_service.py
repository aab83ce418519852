"""Service for detecting courier rates that overlap a rate being written."""
import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import RateConflictError
from app.models.container_type import ContainerType
from app.models.courier_rate import CourierRate, SeaFreightMode
from app.services.rate_predicates import RateIdentity, build_conflict_predicate


logger = logging.getLogger(__name__)


class RateConflictService:
    """Overlap checks run inside the caller's write transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_conflicting_rates(
        self,
        identity: RateIdentity,
        effective_from: date,
        effective_to: date,
    ) -> List[CourierRate]:
        """Stored rates competing with the identity over the period, oldest first."""
        stmt = (
            select(CourierRate)
            .where(build_conflict_predicate(identity, effective_from, effective_to))
            .order_by(CourierRate.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def ensure_no_conflict(
        self,
        identity: RateIdentity,
        effective_from: date,
        effective_to: date,
        container_type_ids: Optional[Iterable[int]] = None,
        exclude_rate_id: Optional[int] = None,
    ) -> None:
        """
        Raise RateConflictError for the first competing rate found.

        FCL rates are checked once per container type, each independently.
        exclude_rate_id drops the rate being updated from the matches so an
        update never conflicts with itself.
        """
        if identity.sea_freight_mode == SeaFreightMode.FCL.value:
            for container_type_id in sorted(set(container_type_ids or [])):
                await self._check(
                    replace(identity, container_type_id=container_type_id),
                    effective_from,
                    effective_to,
                    exclude_rate_id,
                )
        else:
            await self._check(identity, effective_from, effective_to, exclude_rate_id)

    async def _check(
        self,
        identity: RateIdentity,
        effective_from: date,
        effective_to: date,
        exclude_rate_id: Optional[int],
    ) -> None:
        matches = await self.find_conflicting_rates(identity, effective_from, effective_to)
        matches = [rate for rate in matches if rate.id != exclude_rate_id]
        if not matches:
            return

        existing = matches[0]
        container_type_name = None
        if identity.container_type_id is not None:
            container_type = await self.db.get(ContainerType, identity.container_type_id)
            container_type_name = container_type.name if container_type else None

        scope = f" for container type {container_type_name}" if container_type_name else ""
        message = (
            f"Rate conflict: courier '{identity.courier_name}' already has a "
            f"{identity.shipping_type}{'/' + identity.sea_freight_mode if identity.sea_freight_mode else ''} "
            f"rate{scope} on this route from {existing.effective_from.isoformat()} "
            f"to {existing.effective_to.isoformat()} (rate ID: {existing.id})"
        )
        logger.warning(
            f"Conflict with rate {existing.id} for {identity.courier_name} "
            f"{identity.origin_id}->{identity.destination_id} "
            f"{identity.shipping_type}/{identity.sea_freight_mode} "
            f"container_type={identity.container_type_id}"
        )
        raise RateConflictError(
            message,
            conflicting_rate_id=existing.id,
            effective_from=existing.effective_from,
            effective_to=existing.effective_to,
            container_type_id=identity.container_type_id,
            container_type_name=container_type_name,
        )
