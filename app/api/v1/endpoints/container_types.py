"""Container type API endpoints."""
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status, Query

from app.api.deps import DB
from app.schemas.container_type import (
    ContainerTypeCreate,
    ContainerTypeUpdate,
    ContainerTypeResponse,
    ContainerTypeListResponse,
    WeightCalculationResponse,
)
from app.services.container_type_service import ContainerTypeService


router = APIRouter()


@router.get("", response_model=ContainerTypeListResponse)
async def list_container_types(
    db: DB,
    active_only: bool = Query(True),
):
    """List container types, smallest volume first."""
    items = await ContainerTypeService(db).get_container_types(active_only=active_only)
    return ContainerTypeListResponse(
        items=[ContainerTypeResponse.model_validate(item) for item in items],
        total=len(items),
    )


@router.get("/search", response_model=List[ContainerTypeResponse])
async def search_container_types(
    db: DB,
    q: str = Query(..., min_length=1),
):
    """Search by name, code or description."""
    return await ContainerTypeService(db).search_container_types(q)


@router.get("/suitable", response_model=List[ContainerTypeResponse])
async def get_suitable_containers(
    db: DB,
    weight_kg: Decimal = Query(..., ge=0),
    volume_cbm: Decimal = Query(..., ge=0),
):
    """Containers that can hold the cargo, smallest first."""
    return await ContainerTypeService(db).get_suitable_containers(weight_kg, volume_cbm)


@router.get("/chargeable-weight", response_model=WeightCalculationResponse)
async def calculate_chargeable_weight(
    gross_weight_kg: Optional[Decimal] = Query(None, ge=0),
    volume_cbm: Optional[Decimal] = Query(None, ge=0),
):
    """Volume weight and chargeable weight for the cargo."""
    try:
        chargeable = ContainerTypeService.calculate_chargeable_weight(gross_weight_kg, volume_cbm)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return WeightCalculationResponse(
        volume_cbm=volume_cbm,
        gross_weight_kg=gross_weight_kg,
        volume_weight_kg=(
            ContainerTypeService.calculate_volume_weight(volume_cbm)
            if volume_cbm is not None else None
        ),
        chargeable_weight_kg=chargeable,
    )


@router.get("/code/{code}", response_model=ContainerTypeResponse)
async def get_container_type_by_code(code: str, db: DB):
    """Get container type by code."""
    container_type = await ContainerTypeService(db).get_container_type_by_code(code)
    if not container_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Container type not found"
        )
    return container_type


@router.get("/{container_type_id}", response_model=ContainerTypeResponse)
async def get_container_type(container_type_id: int, db: DB):
    """Get container type by ID."""
    container_type = await ContainerTypeService(db).get_container_type(container_type_id)
    if not container_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Container type not found"
        )
    return container_type


@router.post("", response_model=ContainerTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_container_type(data: ContainerTypeCreate, db: DB):
    """Create new container type."""
    try:
        return await ContainerTypeService(db).create_container_type(data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.put("/{container_type_id}", response_model=ContainerTypeResponse)
async def update_container_type(container_type_id: int, data: ContainerTypeUpdate, db: DB):
    """Update container type; volume and payload are recomputed."""
    try:
        return await ContainerTypeService(db).update_container_type(container_type_id, data)
    except LookupError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.delete("/{container_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_container_type(container_type_id: int, db: DB):
    """Delete container type not referenced by any FCL rate."""
    try:
        await ContainerTypeService(db).delete_container_type(container_type_id)
    except LookupError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
