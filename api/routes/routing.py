"""
FastAPI routes for crowd-aware routing endpoints.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from api.schemas.routing import LocationResponse, RouteResponse
from api.services.routing_service import routing_service
from crowd_aware_routing.algorithms import InvalidRoute, RouteResult

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api", tags=["routing"])


def _route_or_400(start: Optional[str], destination: Optional[str]) -> RouteResult:
    if not start or not destination:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={'error': 'invalid_request', 'reason': 'missing_parameter',
                    'message': 'Missing start or destination parameter'}
        )

    logger.info(f"Route calculation request: {start} -> {destination}")
    try:
        return routing_service.calculate_route(start, destination)
    except InvalidRoute as e:
        logger.warning(f"Invalid route request ({e.reason.value}): {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={'error': 'invalid_route', 'reason': e.reason.value, 'message': e.message}
        )
    except Exception as e:
        logger.error(f"Route calculation failed with unexpected error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during route calculation"
        )


@router.get("/routes", response_model=RouteResponse, summary="Calculate Least-Congested Route")
async def calculate_route(start: Optional[str] = Query(default=None, description="Starting site name"),
                          destination: Optional[str] = Query(default=None, description="Destination site name")):
    """
    Calculate the least-congested walking route between two sites.

    Edge costs grow with the crowd density of the site being walked into, so
    the route may pass through calmer sites instead of taking the direct path.

    Example:
        `GET /api/routes?start=Mina&destination=Jamaraat%20Bridge`
    """
    return _route_or_400(start, destination).to_dict()


@router.get("/routes/geojson", summary="Route as GeoJSON")
async def calculate_route_geojson(start: Optional[str] = Query(default=None),
                                  destination: Optional[str] = Query(default=None)):
    """
    Calculate the least-congested route and return it as a GeoJSON FeatureCollection.
    """
    return _route_or_400(start, destination).to_geojson()


@router.get("/locations", response_model=List[LocationResponse], summary="Site Catalog")
async def list_locations():
    """
    List every known site with its capacity, sections and direct neighbours.
    """
    return routing_service.list_locations()
