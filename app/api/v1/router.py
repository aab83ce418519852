from fastapi import APIRouter

from app.api.v1.endpoints import (
    # Reference data
    locations,
    container_types,
    # Rates & quotes
    courier_rates,
    quotes,
)

# Create main API router
api_router = APIRouter(prefix="/api/v1")

# ==================== Reference Data ====================
api_router.include_router(
    locations.router,
    prefix="/locations",
    tags=["Locations"]
)

api_router.include_router(
    container_types.router,
    prefix="/container-types",
    tags=["Container Types"]
)

# ==================== Courier Rates ====================
api_router.include_router(
    courier_rates.router,
    prefix="/courier-rates",
    tags=["Courier Rates"]
)

# ==================== Quotes ====================
api_router.include_router(
    quotes.router,
    prefix="/quotes",
    tags=["Quotes"]
)
