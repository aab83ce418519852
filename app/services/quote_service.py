"""Quote matching: find rates that can serve a shipment and price each one."""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.courier_rate import CourierRate
from app.schemas.quote import ShippingRequirement
from app.services.courier_rate_service import CourierRateService
from app.services.freight_pricing import (
    PricingModel, price_rate, chargeable_quantity,
)
from app.services.rate_predicates import build_quote_predicate


logger = logging.getLogger(__name__)


class RateQuotation:
    """A matched rate with its computed amount (None = not applicable)."""
    def __init__(
        self,
        rate: CourierRate,
        amount: Optional[Decimal],
        pricing_model: Optional[PricingModel] = None,
        chargeable_quantity: Optional[Decimal] = None,
    ):
        self.rate = rate
        self.amount = amount
        self.pricing_model = pricing_model
        self.chargeable_quantity = chargeable_quantity


class QuoteService:
    """Service for computing freight quotes from a shipping requirement."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.rate_service = CourierRateService(db)

    async def compute_quotes(self, requirement: ShippingRequirement) -> List[RateQuotation]:
        """
        Quote every active rate matching the requirement.

        All structurally matching rates are returned, cheapest first; rates
        that cannot price the shipment keep amount=None and sort last.
        """
        candidates = await self.rate_service.find_matching_rates(
            build_quote_predicate(requirement)
        )

        quotations = [self.quote(rate, requirement) for rate in candidates]
        quotations.sort(key=lambda q: (q.amount is None, q.amount or Decimal("0"), q.rate.id))

        priced = sum(1 for q in quotations if q.amount is not None)
        logger.info(
            f"Quote request {requirement.origin_id}->{requirement.destination_id} "
            f"{requirement.shipping_type}/{requirement.sea_freight_mode}: "
            f"{len(candidates)} candidates, {priced} priced"
        )
        return quotations

    @staticmethod
    def quote(rate: CourierRate, requirement: ShippingRequirement) -> RateQuotation:
        model, amount = price_rate(rate, requirement)
        if model is None:
            return RateQuotation(rate, None)

        return RateQuotation(
            rate,
            amount,
            pricing_model=model,
            chargeable_quantity=chargeable_quantity(model, rate, requirement),
        )
