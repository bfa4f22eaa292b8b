"""
Crowd-Aware Routing API - FastAPI Main Application

A RESTful API for least-congested walking routes between pilgrimage sites.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import uvicorn

from api.routes.density import router as density_router
from api.routes.routing import router as routing_router
from api.services.routing_service import routing_service
from crowd_aware_routing import __version__

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - startup and shutdown events.
    """
    # Startup
    logger.info("Starting Crowd-Aware Routing API...")

    # Warm the snapshot store so the first route request is fast
    snapshots = routing_service.get_snapshots_or_estimate()
    logger.info(f"✓ Routing service ready with {len(snapshots)} site snapshots")

    yield

    # Shutdown
    logger.info("Shutting down Crowd-Aware Routing API...")


# Create FastAPI application
app = FastAPI(
    title="Crowd-Aware Routing API",
    description="""
    **Least-congested walking routes between pilgrimage sites**

    Routes are computed over a small graph of named sites. Each path's cost
    grows with the crowd density of the sites it enters, so the answer is the
    least-congested way from A to B right now rather than the shortest.

    ## Features

    - **Crowd Density**: Per-site and per-section density snapshots
    - **Congestion-Aware Routing**: Dijkstra over density-penalised distances
    - **Travel Time**: Walking speed adjusted to the worst crowding on the route
    - **Directions**: Narrated steps with crowd warnings
    - **GeoJSON Output**: Route line through the site coordinates

    ## Quick Start

    1. Check service health: `GET /health`
    2. See current densities: `GET /api/crowd-density`
    3. Calculate a route: `GET /api/routes?start=Mina&destination=Arafat`
    """,
    version=__version__,
    lifespan=lifespan
)

# Add CORS middleware for web applications
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Custom exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors with detailed information.
    """
    logger.warning(f"Validation error for {request.url}: {exc}")
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "validation_error",
            "message": "Request validation failed",
            "details": jsonable_errors(exc)
        }
    )


def jsonable_errors(exc: RequestValidationError):
    """Validation errors without non-serialisable context objects."""
    return [
        {key: value for key, value in error.items() if key != 'ctx'}
        for error in exc.errors()
    ]


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected errors gracefully.
    """
    logger.error(f"Unexpected error for {request.url}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
            "details": None
        }
    )


# Include routers
app.include_router(density_router)
app.include_router(routing_router)


@app.get("/", tags=["general"])
async def root():
    """
    API root endpoint with basic information.
    """
    return {
        "api": "Crowd-Aware Routing API",
        "version": __version__,
        "status": "operational",
        "documentation": "/docs",
        "health_check": "/health",
        "endpoints": {
            "GET /api/crowd-density": "Current density per site (force=true to recompute)",
            "POST /api/crowd-density": "Force a density recalculation",
            "GET /api/routes": "Least-congested route between two sites",
            "GET /api/routes/geojson": "Route as a GeoJSON FeatureCollection",
            "GET /api/locations": "Site catalog with direct neighbours"
        }
    }


@app.get("/health", tags=["general"])
async def api_health():
    """
    Simple health check endpoint.
    """
    try:
        service_health = routing_service.get_health_status()
        return {
            "api_status": "healthy",
            "service_status": service_health.status,
            "snapshot_available": service_health.snapshot_available,
            "snapshot_age_seconds": service_health.snapshot_age_seconds,
            "cache_enabled": service_health.cache_enabled,
            "timestamp": datetime.now().isoformat()
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "api_status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.now().isoformat()
            }
        )


# Development server configuration
if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload for development
        log_level="info"
    )
