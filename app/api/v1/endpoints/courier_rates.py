"""Courier rate API endpoints."""
from datetime import date
from math import ceil
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status, Query

from app.api.deps import DB
from app.core.exceptions import RateConflictError, InvalidRateError, NotFoundError
from app.models.courier_rate import ShippingType, SeaFreightMode
from app.schemas.courier_rate import (
    CourierRateCreate,
    CourierRateUpdate,
    CourierRateResponse,
    CourierRateListResponse,
    CourierRateSearchCriteria,
    RateConflictErrorResponse,
)
from app.services.courier_rate_service import CourierRateService


router = APIRouter()


def conflict_exception(e: RateConflictError) -> HTTPException:
    body = RateConflictErrorResponse(
        message=e.message,
        conflicting_rate_id=e.conflicting_rate_id,
        conflicting_effective_from=e.effective_from,
        conflicting_effective_to=e.effective_to,
        container_type_id=e.container_type_id,
        container_type_name=e.container_type_name,
        suggestion=e.suggestion,
    )
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=body.model_dump(mode="json"),
    )


@router.get("", response_model=CourierRateListResponse)
async def list_courier_rates(
    db: DB,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    shipping_type: Optional[ShippingType] = Query(None),
    sea_freight_mode: Optional[SeaFreightMode] = Query(None),
    is_active: Optional[bool] = Query(None),
):
    """List courier rates with filters."""
    service = CourierRateService(db)
    skip = (page - 1) * size

    items, total = await service.list_rates(
        shipping_type=shipping_type,
        sea_freight_mode=sea_freight_mode,
        is_active=is_active,
        skip=skip,
        limit=size,
    )

    return CourierRateListResponse(
        items=[CourierRateResponse.model_validate(item) for item in items],
        total=total,
        page=page,
        size=size,
        pages=ceil(total / size) if total > 0 else 1,
    )


@router.get("/active", response_model=List[CourierRateResponse])
async def list_active_courier_rates(
    db: DB,
    on_date: Optional[date] = Query(None, description="Defaults to today"),
):
    """Active rates effective on a date."""
    return await CourierRateService(db).get_active_rates(on_date)


@router.post("/search", response_model=CourierRateListResponse)
async def search_courier_rates(criteria: CourierRateSearchCriteria, db: DB):
    """Advanced rate search with sorting and pagination."""
    items, total = await CourierRateService(db).search_rates(criteria)

    return CourierRateListResponse(
        items=[CourierRateResponse.model_validate(item) for item in items],
        total=total,
        page=criteria.page,
        size=criteria.size,
        pages=ceil(total / criteria.size) if total > 0 else 1,
    )


@router.get("/{rate_id}", response_model=CourierRateResponse)
async def get_courier_rate(rate_id: int, db: DB):
    """Get courier rate with its mode payload."""
    rate = await CourierRateService(db).get_rate(rate_id)
    if not rate:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Courier rate not found"
        )
    return CourierRateResponse.model_validate(rate)


@router.post(
    "",
    response_model=CourierRateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": RateConflictErrorResponse}},
)
async def create_courier_rate(data: CourierRateCreate, db: DB):
    """
    Create a courier rate.

    Rejected with 409 if the same courier already has an overlapping rate
    for the route and mode (per container type for FCL).
    """
    service = CourierRateService(db)

    try:
        rate = await service.create_rate(data)
    except RateConflictError as e:
        raise conflict_exception(e)
    except InvalidRateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )

    return CourierRateResponse.model_validate(rate)


@router.put(
    "/{rate_id}",
    response_model=CourierRateResponse,
    responses={409: {"model": RateConflictErrorResponse}},
)
async def update_courier_rate(rate_id: int, data: CourierRateUpdate, db: DB):
    """Update courier rate. Courier, route and mode cannot change."""
    service = CourierRateService(db)

    try:
        rate = await service.update_rate(rate_id, data)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )
    except RateConflictError as e:
        raise conflict_exception(e)
    except InvalidRateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )

    return CourierRateResponse.model_validate(rate)


@router.delete("/{rate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_courier_rate(
    rate_id: int,
    db: DB,
    hard_delete: bool = Query(False),
):
    """Delete courier rate (soft delete by default)."""
    try:
        await CourierRateService(db).delete_rate(rate_id, hard_delete=hard_delete)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )
