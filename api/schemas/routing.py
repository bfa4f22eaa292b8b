"""
Pydantic schemas for the crowd-aware routing API.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from crowd_aware_routing.density.modifiers import parse_event, parse_weather


class Coordinates(BaseModel):
    """Geographic coordinate."""
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")


class SectionDensity(BaseModel):
    """Density reading for one section of a site."""
    id: str
    name: str
    density: float = Field(..., description="People per square meter")
    density_level: str
    crowd_size: int
    occupancy: float


class DensitySnapshotResponse(BaseModel):
    """Density reading for one site."""
    location_name: str
    coordinates: Coordinates
    occupancy: float = Field(..., description="Occupancy as a fraction of capacity")
    occupancy_percentage: float
    density: float = Field(..., description="People per square meter")
    density_level: str = Field(..., description="'low', 'medium', 'high' or 'critical'")
    crowd_size: int
    capacity: int
    sections: List[SectionDensity]
    timestamp: str
    meta_data: Dict[str, int]


class RecalculateRequest(BaseModel):
    """Request body for forcing a density recalculation."""
    recalculate: bool = Field(default=False, description="Must be true to trigger a recalculation")
    weather: Optional[str] = Field(default=None, description="'hot', 'rain', 'pleasant' or 'normal'")
    event: Optional[str] = Field(default=None,
                                 description="'main_ritual_day', 'ordinary_day' or 'stoning_ritual'")

    @field_validator('weather')
    @classmethod
    def validate_weather(cls, v):
        """Ensure weather is a known condition."""
        if v is not None:
            parse_weather(v)
        return v

    @field_validator('event')
    @classmethod
    def validate_event(cls, v):
        """Ensure event is a known signal."""
        if v is not None:
            parse_event(v)
        return v


class RecalculateResponse(BaseModel):
    """Result of a density recalculation."""
    success: bool
    message: str
    count: int = Field(..., description="Number of site snapshots produced")


class RouteResponse(BaseModel):
    """Least-congested route between two sites."""
    start: str
    destination: str
    path: List[str]
    via: List[str] = Field(..., description="Intermediate sites")
    distance_km: float
    distance: str
    duration_minutes: int
    duration: str
    congestion_level: str = Field(..., description="Worst density level on the path")
    speed_multiplier: float
    adjusted_walking_speed_kmh: float
    adjusted_walking_speed: str
    crowd_impact: str = Field(..., description="'significant' or 'moderate'")
    pilgrim_count_range: str
    directions: List[str]
    algorithm: str


class LocationResponse(BaseModel):
    """Catalog entry for one site."""
    name: str
    coordinates: Coordinates
    area_m2: float
    capacity: int
    sections: List[str]
    neighbours: Dict[str, float] = Field(..., description="Directly connected sites with distance in km")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    snapshot_available: bool = Field(..., description="Whether a density snapshot set is held in memory")
    snapshot_age_seconds: Optional[float] = Field(default=None, description="Age of the held snapshot set")
    location_count: int = Field(..., description="Number of sites in the catalog")
    cache_enabled: bool = Field(..., description="Whether the persistent snapshot cache is configured")
