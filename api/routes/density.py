"""
FastAPI routes for crowd density snapshots.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from api.schemas.routing import DensitySnapshotResponse, RecalculateRequest, RecalculateResponse
from api.services.routing_service import routing_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/crowd-density", tags=["density"])


@router.get("", response_model=List[DensitySnapshotResponse], summary="Current Crowd Density")
async def get_crowd_density(force: bool = Query(default=False, description="Recompute, ignoring cached data")):
    """
    Current density snapshot for every site.

    Recent data (inside the freshness window) is reused unless `force=true`.
    """
    snapshots = routing_service.get_snapshots_or_estimate(force_refresh=force)
    return [snapshot.to_dict() for snapshot in snapshots]


@router.post("", response_model=RecalculateResponse, summary="Recalculate Crowd Density")
async def recalculate_crowd_density(request: RecalculateRequest):
    """
    Force a recalculation of every site's density.

    Optional `weather` and `event` replace the current conditions for this and
    later recalculations.
    """
    if not request.recalculate:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Manual density entry is not supported; send {\"recalculate\": true}"
        )

    snapshots = routing_service.recalculate(weather=request.weather, event=request.event)
    return RecalculateResponse(
        success=True,
        message="Crowd density data recalculated",
        count=len(snapshots)
    )
