"""
Synthetic crowd density estimator for the pilgrimage site catalog.

Produces a complete, internally consistent SnapshotSet for a given instant
from time-of-day, ritual-calendar and weather modifiers. Any live feed that
implements BaseDensitySource can replace it.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ..config.estimator_config import EstimatorConfig
from ..data.locations import LOCATION_CATALOG
from ..data.models import (
    DensityLevel,
    DensitySnapshot,
    Location,
    SectionSnapshot,
    SnapshotSet,
    classify_density
)
from .modifiers import (
    SpecialEvent,
    Weather,
    base_occupancy,
    current_total_pilgrims,
    is_main_ritual_day,
    is_stoning_window,
    location_time_modifier,
    parse_event,
    parse_weather,
    time_modifier,
    weather_modifier
)

logger = logging.getLogger(__name__)


class BaseDensitySource(ABC):
    """
    Abstract source of density snapshot sets.

    This defines the shape a live sensor feed must have to stand in for the
    synthetic estimator.
    """

    @abstractmethod
    def estimate(self, now: Optional[datetime] = None,
                 weather: Union[str, Weather, None] = None,
                 event: Union[str, SpecialEvent, None] = None) -> SnapshotSet:
        """
        Produce a snapshot set covering every catalog location.

        Args:
            now: Evaluation time (defaults to the current local time)
            weather: Optional observed weather
            event: Optional special-event signal

        Returns:
            SnapshotSet with exactly one snapshot per location
        """
        pass


class CrowdDensityEstimator(BaseDensitySource):
    """
    Time-varying synthetic occupancy model.

    Each location follows its own behaviour curve, scaled by time and weather
    modifiers and a small bounded jitter. With the demo band mix enabled,
    every Nth location is pinned to a fixed density band so that all four
    levels appear in each evaluation.
    """

    def __init__(self, config: Optional[EstimatorConfig] = None,
                 locations: Sequence[Location] = LOCATION_CATALOG,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize the estimator.

        Args:
            config: Estimator configuration
            locations: Site catalog to estimate
            rng: Random generator (defaults to one seeded from config.seed)
        """
        self.config = config or EstimatorConfig()
        self.config.validate()
        self.locations: Tuple[Location, ...] = tuple(locations)
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        logger.info(f"CrowdDensityEstimator initialized for {len(self.locations)} locations "
                    f"(demo band mix: {'on' if self.config.demo_band_mix else 'off'})")

    def estimate(self, now: Optional[datetime] = None,
                 weather: Union[str, Weather, None] = None,
                 event: Union[str, SpecialEvent, None] = None) -> SnapshotSet:
        now = now or datetime.now()
        weather = parse_weather(weather)
        event = parse_event(event)
        hour = now.hour

        generic_time_modifier = time_modifier(hour, self.config)
        ritual_day = is_main_ritual_day(now, self.config, event)
        stoning_window = is_stoning_window(hour, self.config, event)
        weather_mod = weather_modifier(hour, self.config, weather)
        total_pilgrims = current_total_pilgrims(now, self.config)

        logger.debug(f"Estimating densities at {now.isoformat()} (time x{generic_time_modifier}, "
                     f"weather x{weather_mod}, ritual day: {ritual_day})")

        snapshots = []
        for index, location in enumerate(self.locations):
            forced_band = self._forced_band(index)

            if forced_band is not None:
                occupancy = self._forced_occupancy(location, forced_band)
            else:
                loc_time_mod = location_time_modifier(
                    location.name, hour, generic_time_modifier,
                    ritual_day, stoning_window, self.config
                )
                occupancy = base_occupancy(location.name, now, ritual_day, stoning_window)
                occupancy *= loc_time_mod * weather_mod

            occupancy *= self._jitter(self.config.occupancy_jitter)

            snapshots.append(self._build_snapshot(location, occupancy, now, total_pilgrims))

        snapshot_set = SnapshotSet(
            generated_at=now,
            total_pilgrims_target=total_pilgrims,
            snapshots=tuple(snapshots)
        )

        logger.info(f"Total pilgrims currently distributed: {snapshot_set.total_crowd} "
                    f"(target: {total_pilgrims})")
        return snapshot_set

    def _forced_band(self, index: int) -> Optional[DensityLevel]:
        if not self.config.demo_band_mix:
            return None
        cycle = self.config.demo_band_cycle
        band = cycle[index % len(cycle)]
        return DensityLevel(band) if band is not None else None

    def _forced_occupancy(self, location: Location, band: DensityLevel) -> float:
        """Occupancy that lands the location's density on the band's target."""
        target_density = self.config.demo_band_targets[band.value]
        return target_density * location.area_m2 / location.capacity

    def _jitter(self, spread: float) -> float:
        return float(self.rng.uniform(1.0 - spread, 1.0 + spread))

    def _build_snapshot(self, location: Location, occupancy: float,
                        now: datetime, total_pilgrims: int) -> DensitySnapshot:
        thresholds = self.config.density_thresholds

        crowd_size = int(np.floor(occupancy * location.capacity))
        density = crowd_size / location.area_m2
        level = classify_density(density, thresholds)

        sections = []
        for section in location.sections:
            variation = self._jitter(self.config.section_jitter)
            section_density = density * variation
            sections.append(SectionSnapshot(
                section_id=section.section_id,
                name=section.name,
                density=section_density,
                density_level=classify_density(section_density, thresholds),
                crowd_size=int(np.floor(crowd_size * section.percentage)),
                occupancy=occupancy * variation
            ))

        spread = self.config.coordinate_jitter_deg
        latitude = location.latitude + float(self.rng.uniform(-spread, spread))
        longitude = location.longitude + float(self.rng.uniform(-spread, spread))

        return DensitySnapshot(
            location_name=location.name,
            latitude=latitude,
            longitude=longitude,
            occupancy=occupancy,
            density=density,
            density_level=level,
            crowd_size=crowd_size,
            capacity=location.capacity,
            sections=tuple(sections),
            timestamp=now,
            current_total_pilgrims=total_pilgrims
        )


def estimate_densities(now: Optional[datetime] = None,
                       weather: Union[str, Weather, None] = None,
                       event: Union[str, SpecialEvent, None] = None,
                       config: Optional[EstimatorConfig] = None) -> SnapshotSet:
    """
    Convenience function: estimate densities with a fresh estimator.

    Args:
        now: Evaluation time (defaults to the current local time)
        weather: Optional observed weather ('hot', 'rain', 'pleasant', 'normal')
        event: Optional event ('main_ritual_day', 'ordinary_day', 'stoning_ritual')
        config: Estimator configuration

    Returns:
        SnapshotSet covering every catalog location
    """
    return CrowdDensityEstimator(config).estimate(now, weather, event)
