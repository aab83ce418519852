"""Freight quote API endpoints."""
from fastapi import APIRouter

from app.api.deps import DB
from app.schemas.courier_rate import CourierRateResponse
from app.schemas.quote import ShippingRequirement, QuoteResponse, QuoteListResponse
from app.services.quote_service import QuoteService


router = APIRouter()


@router.post("", response_model=QuoteListResponse)
async def compute_quotes(requirement: ShippingRequirement, db: DB):
    """
    Quote every active rate that can serve the shipment.

    Omit shipping_type to quote all modes. For FCL, container_count maps
    container type id to number of containers. Quotes with amount=null are
    rates that matched but cannot price this shipment.
    """
    quotations = await QuoteService(db).compute_quotes(requirement)

    items = []
    for quotation in quotations:
        rate = CourierRateResponse.model_validate(quotation.rate)
        items.append(QuoteResponse(
            **rate.model_dump(),
            pricing_model=quotation.pricing_model.value if quotation.pricing_model else None,
            chargeable_quantity=quotation.chargeable_quantity,
            amount=quotation.amount,
        ))

    return QuoteListResponse(items=items, total=len(items), requirement=requirement)
