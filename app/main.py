from contextlib import asynccontextmanager
import logging
import traceback

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.v1.router import api_router
from app.database import async_session_factory


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
    - Create tables
    - Seed locations and container types when empty
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    from app.database_init import startup_initialization
    await startup_initialization()

    yield

    # Shutdown
    logger.info("Shutting down...")


# OpenAPI Tags with detailed descriptions
OPENAPI_TAGS = [
    {"name": "Locations", "description": "Sea ports, airports and inland points"},
    {"name": "Container Types", "description": "ISO container types with derived volume and payload"},
    {"name": "Courier Rates", "description": "Air, LCL and FCL rates with overlap protection"},
    {"name": "Quotes", "description": "Freight quotes for a shipping requirement"},
]

FULL_API_DESCRIPTION = """
## Freight Quote API

Quotes freight costs across air, FCL and LCL sea freight, and keeps courier
rates free of overlapping validity periods.

### Pricing Models

| Model | Billing |
|-------|---------|
| **AIR_PER_KG** | max(gross kg, cbm x 167), minimum charge, fuel %, security |
| **WATER_LCL_PER_CBM** | max(cbm, kg / 1000), doc fee, LCL service, bunker % |
| **WATER_FCL_PER_CONTAINER** | per container type: rate, doc fee, THC, bunker % |

### Error Codes

| Code | Description |
|------|-------------|
| 400 | Bad Request - Invalid rate or reference data |
| 404 | Not Found - Resource doesn't exist |
| 409 | Conflict - Overlapping rate exists |
| 422 | Unprocessable Entity - Request validation failed |
| 500 | Internal Server Error |
"""

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=FULL_API_DESCRIPTION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=OPENAPI_TAGS,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """JSON error envelope for unhandled errors; traceback only in DEBUG."""
    # Preserve HTTP status code for HTTPException, default to 500 for others
    if isinstance(exc, HTTPException):
        status_code = exc.status_code
        error_message = exc.detail
    else:
        status_code = 500
        error_message = str(exc)
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)

    error_detail = {
        "error": error_message,
        "type": type(exc).__name__,
        "path": str(request.url.path),
        "method": request.method,
    }
    if settings.DEBUG:
        error_detail["traceback"] = traceback.format_exc()

    response = JSONResponse(
        status_code=status_code,
        content=error_detail
    )

    # Add CORS headers if origin is allowed
    origin = request.headers.get("origin", "")
    if origin in settings.cors_origins_list or "*" in settings.cors_origins_list:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"

    return response


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint with database validation."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError
    from datetime import datetime, timezone

    health_status = {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "database": "unknown"
        }
    }

    # Check database connectivity
    try:
        async with async_session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            health_status["checks"]["database"] = "connected"
    except (SQLAlchemyError, OSError) as e:
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = f"error: {str(e)}"

    # Return 503 if unhealthy
    if health_status["status"] == "unhealthy":
        return JSONResponse(status_code=503, content=health_status)

    return health_status


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
    }
