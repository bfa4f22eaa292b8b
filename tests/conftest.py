"""
Test Configuration
==================

Pytest fixtures shared by the crowd-aware routing tests.
"""

from datetime import datetime, timedelta

import pytest

from crowd_aware_routing.algorithms import CongestionAwareRouter
from crowd_aware_routing.config import EstimatorConfig, RoutingConfig
from crowd_aware_routing.data import DensityLevel, SnapshotSet, location_names
from crowd_aware_routing.density import BaseDensitySource, CrowdDensityEstimator

# A Monday, outside the minute-based ritual rule
MONDAY_MORNING = datetime(2024, 6, 10, 9, 1)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = MONDAY_MORNING):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class CountingSource(BaseDensitySource):
    """Density source returning fixed levels and recording each call."""

    def __init__(self, levels=None):
        self.levels = levels or {name: DensityLevel.LOW for name in location_names()}
        self.calls = []

    def estimate(self, now=None, weather=None, event=None):
        now = now or datetime.now()
        self.calls.append((now, weather, event))
        return SnapshotSet.from_levels(self.levels, generated_at=now)


def levels_with(overrides=None):
    """All catalog sites low, except the given overrides."""
    levels = {name: DensityLevel.LOW for name in location_names()}
    levels.update(overrides or {})
    return levels


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def router():
    return CongestionAwareRouter(RoutingConfig.create_default_config())


@pytest.fixture
def estimator():
    return CrowdDensityEstimator(EstimatorConfig.create_deterministic_config(seed=42))


@pytest.fixture
def all_low():
    return SnapshotSet.from_levels(levels_with(), generated_at=MONDAY_MORNING)


@pytest.fixture
def critical_jamaraat():
    """Mina low, Jamaraat Bridge critical."""
    return SnapshotSet.from_levels(
        {'Mina': DensityLevel.LOW, 'Jamaraat Bridge': DensityLevel.CRITICAL},
        generated_at=MONDAY_MORNING
    )
