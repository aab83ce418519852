"""Location API endpoints."""
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status, Query

from app.api.deps import DB
from app.models.location import LocationType
from app.schemas.location import (
    LocationCreate,
    LocationUpdate,
    LocationResponse,
    LocationListResponse,
)
from app.services.location_service import LocationService


router = APIRouter()


@router.get("", response_model=LocationListResponse)
async def list_locations(
    db: DB,
    search: Optional[str] = Query(None, description="Name, code, country or country code"),
    country_code: Optional[str] = Query(None),
    location_type: Optional[LocationType] = Query(None),
    is_active: Optional[bool] = Query(None),
):
    """List locations with filters."""
    service = LocationService(db)
    items, total = await service.get_locations(
        search=search,
        country_code=country_code,
        location_type=location_type,
        is_active=is_active,
    )
    return LocationListResponse(
        items=[LocationResponse.model_validate(item) for item in items],
        total=total,
    )


@router.get("/seaports", response_model=List[LocationResponse])
async def list_seaports(db: DB):
    """Active sea ports."""
    return await LocationService(db).get_seaports()


@router.get("/airports", response_model=List[LocationResponse])
async def list_airports(db: DB):
    """Active airports."""
    return await LocationService(db).get_airports()


@router.get("/country-codes", response_model=List[str])
async def list_country_codes(db: DB):
    """Distinct country codes."""
    return await LocationService(db).get_country_codes()


@router.get("/code/{code}", response_model=LocationResponse)
async def get_location_by_code(code: str, db: DB):
    """Get location by code."""
    location = await LocationService(db).get_location_by_code(code)
    if not location:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Location not found"
        )
    return location


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(location_id: int, db: DB):
    """Get location by ID."""
    location = await LocationService(db).get_location(location_id)
    if not location:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Location not found"
        )
    return location


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(data: LocationCreate, db: DB):
    """Create new location."""
    try:
        return await LocationService(db).create_location(data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(location_id: int, data: LocationUpdate, db: DB):
    """Update location."""
    try:
        return await LocationService(db).update_location(location_id, data)
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


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(location_id: int, db: DB):
    """Delete location not referenced by any rate."""
    try:
        await LocationService(db).delete_location(location_id)
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
