"""
Service layer for the crowd-aware routing API.

Owns the latest density snapshot set and decides when to reuse, reload or
recompute it. Cache trouble never reaches the caller: every failure path
falls back to a direct recomputation.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional, Union

from crowd_aware_routing import __version__
from crowd_aware_routing.algorithms import CongestionAwareRouter, InvalidRoute, RouteResult
from crowd_aware_routing.cache import CacheError, SnapshotCache, SnapshotStore
from crowd_aware_routing.config import EstimatorConfig, RoutingConfig, ServiceConfig
from crowd_aware_routing.data import LOCATION_CATALOG, SnapshotSet, get_distance
from crowd_aware_routing.density import (
    BaseDensitySource,
    CrowdDensityEstimator,
    SpecialEvent,
    Weather,
    parse_event,
    parse_weather
)
from api.schemas.routing import HealthResponse

logger = logging.getLogger(__name__)


class CrowdRoutingService:
    """
    Service class that provides crowd-aware routing functionality for the API.
    """

    def __init__(self, config: Optional[ServiceConfig] = None,
                 source: Optional[BaseDensitySource] = None,
                 router: Optional[CongestionAwareRouter] = None,
                 cache: Optional[SnapshotCache] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize the routing service.

        Args:
            config: Service configuration (defaults to environment variables)
            source: Density source (defaults to the synthetic estimator)
            router: Congestion-aware router
            cache: Persistent snapshot cache (defaults to config.cache_path, if set)
            clock: Time source, injectable for tests
        """
        self.config = config or ServiceConfig.from_env()
        self.config.validate()
        self.clock = clock

        self.source = source or CrowdDensityEstimator(
            EstimatorConfig(demo_band_mix=self.config.demo_band_mix, seed=self.config.seed)
        )
        self.router = router or CongestionAwareRouter(RoutingConfig())
        self.store = SnapshotStore()
        self.cache = cache if cache is not None else self._open_cache()

        self.weather: Optional[Weather] = None
        self.event: Optional[SpecialEvent] = None

        # Serialises recomputation; readers never take it
        self._refresh_lock = threading.Lock()

        logger.info(f"Crowd routing service initialized "
                    f"(cache: {'enabled' if self.cache else 'disabled'}, "
                    f"freshness: {self.config.freshness_seconds:.0f}s)")

    def _open_cache(self) -> Optional[SnapshotCache]:
        if not self.config.cache_path:
            return None
        try:
            return SnapshotCache(self.config.cache_path)
        except CacheError as e:
            logger.warning(f"Snapshot cache unavailable, continuing without it: {e}")
            return None

    def get_snapshots(self, force_refresh: bool = False) -> SnapshotSet:
        """
        Latest density snapshot set.

        Reuses the in-memory set, then the persistent cache, while they are
        within the freshness window; otherwise recomputes.

        Args:
            force_refresh: Recompute unconditionally, ignoring freshness

        Returns:
            SnapshotSet covering every catalog site
        """
        now = self.clock()

        if not force_refresh:
            snapshots = self.store.fresh(now, self.config.freshness_seconds)
            if snapshots is not None:
                return snapshots

            snapshots = self._load_cached(now)
            if snapshots is not None:
                logger.info("Using recent snapshot set from cache")
                return self.store.publish(snapshots)

        return self._refresh(now, force=force_refresh)

    def get_snapshots_or_estimate(self, force_refresh: bool = False) -> SnapshotSet:
        """get_snapshots, falling back to a direct estimate on any failure."""
        try:
            return self.get_snapshots(force_refresh)
        except Exception as e:
            logger.error(f"Snapshot retrieval failed, using direct calculation: {e}")
            return self.source.estimate(self.clock(), self.weather, self.event)

    def _load_cached(self, now: datetime) -> Optional[SnapshotSet]:
        if self.cache is None:
            return None
        try:
            snapshots = self.cache.load()
        except CacheError as e:
            logger.error(f"Error reading snapshot cache, recomputing: {e}")
            return None

        if snapshots is None:
            return None
        if not snapshots.is_fresh(now, self.config.freshness_seconds):
            logger.info(f"Cached snapshot set is stale ({snapshots.age_seconds(now):.0f}s old)")
            return None
        return snapshots

    def _refresh(self, now: datetime, force: bool = False) -> SnapshotSet:
        with self._refresh_lock:
            if not force:
                # another request may have refreshed while we waited
                snapshots = self.store.fresh(now, self.config.freshness_seconds)
                if snapshots is not None:
                    return snapshots

            logger.info("Generating new crowd density data")
            snapshots = self.source.estimate(now, self.weather, self.event)
            self.store.publish(snapshots)

        if self.cache is not None:
            try:
                self.cache.save(snapshots)
            except CacheError as e:
                logger.error(f"Error writing snapshot cache, continuing with computed data: {e}")
        return snapshots

    def recalculate(self, weather: Union[str, Weather, None] = None,
                    event: Union[str, SpecialEvent, None] = None) -> SnapshotSet:
        """
        Force a recomputation, optionally under new weather/event conditions.

        The conditions stick for later refreshes until changed again.
        """
        if weather is not None:
            self.weather = parse_weather(weather)
        if event is not None:
            self.event = parse_event(event)
        return self.get_snapshots(force_refresh=True)

    def calculate_route(self, start: str, destination: str) -> RouteResult:
        """
        Calculate the least-congested route between two sites.

        Args:
            start: Starting site name
            destination: Destination site name

        Returns:
            RouteResult for the current crowd picture

        Raises:
            InvalidRoute: Same, unknown or disconnected sites
        """
        try:
            snapshots = self.get_snapshots()
            return self.router.find_route(start, destination, snapshots)
        except InvalidRoute:
            raise
        except Exception as e:
            logger.error(f"Route calculation failed, retrying with fresh densities: {e}")
            snapshots = self.source.estimate(self.clock(), self.weather, self.event)
            return self.router.find_route(start, destination, snapshots)

    def list_locations(self) -> List[Dict]:
        """Catalog entries with their direct neighbours."""
        locations = []
        for location in LOCATION_CATALOG:
            neighbours = {}
            for other in LOCATION_CATALOG:
                if other.name == location.name:
                    continue
                distance = get_distance(location.name, other.name)
                if distance is not None:
                    neighbours[other.name] = distance
            locations.append({
                'name': location.name,
                'coordinates': {'lat': location.latitude, 'lng': location.longitude},
                'area_m2': location.area_m2,
                'capacity': location.capacity,
                'sections': [section.name for section in location.sections],
                'neighbours': neighbours
            })
        return locations

    def get_health_status(self) -> HealthResponse:
        """Get the health status of the routing service."""
        snapshots = self.store.current()
        age = snapshots.age_seconds(self.clock()) if snapshots is not None else None
        return HealthResponse(
            status="healthy",
            version=__version__,
            snapshot_available=snapshots is not None,
            snapshot_age_seconds=round(age, 1) if age is not None else None,
            location_count=len(LOCATION_CATALOG),
            cache_enabled=self.cache is not None
        )


# Global service instance
routing_service = CrowdRoutingService()
