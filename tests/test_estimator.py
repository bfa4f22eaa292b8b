"""
Density Estimator Tests

Covers completeness, level classification, the demo band mix and
reproducibility of the synthetic crowd density model.
"""

import math
from datetime import datetime

import pytest

from crowd_aware_routing.config import EstimatorConfig
from crowd_aware_routing.data import DensityLevel, classify_density, location_names
from crowd_aware_routing.density import CrowdDensityEstimator, estimate_densities

from conftest import MONDAY_MORNING

THRESHOLDS = (0.3, 0.8, 1.5)


class TestSnapshotSet:
    """Shape of an evaluation"""

    def test_one_snapshot_per_location_in_catalog_order(self, estimator):
        snapshots = estimator.estimate(MONDAY_MORNING)

        assert len(snapshots) == 8
        assert snapshots.location_names == location_names()
        assert snapshots.generated_at == MONDAY_MORNING
        assert all(s.timestamp == MONDAY_MORNING for s in snapshots)

    def test_total_pilgrims_follows_minute_of_hour(self, estimator):
        snapshots = estimator.estimate(datetime(2024, 6, 10, 9, 30))

        assert snapshots.total_pilgrims_target == 300000
        assert all(s.current_total_pilgrims == 300000 for s in snapshots)

    def test_crowd_is_floor_of_occupancy_times_capacity(self, estimator):
        for snapshot in estimator.estimate(MONDAY_MORNING):
            assert snapshot.crowd_size == math.floor(snapshot.occupancy * snapshot.capacity)
            assert snapshot.crowd_size >= 0

    def test_rejects_unknown_weather(self, estimator):
        with pytest.raises(ValueError):
            estimator.estimate(MONDAY_MORNING, weather='snow')


class TestClassification:
    """Levels are a step function of density"""

    @pytest.mark.parametrize("density, expected", [
        (0.0, DensityLevel.LOW),
        (0.3, DensityLevel.LOW),
        (0.31, DensityLevel.MEDIUM),
        (0.8, DensityLevel.MEDIUM),
        (1.5, DensityLevel.HIGH),
        (1.51, DensityLevel.CRITICAL),
    ])
    def test_threshold_boundaries(self, density, expected):
        assert classify_density(density, THRESHOLDS) is expected

    def test_location_levels_match_density(self, estimator):
        for snapshot in estimator.estimate(MONDAY_MORNING):
            assert snapshot.density_level is classify_density(snapshot.density, THRESHOLDS)

    def test_section_levels_are_classified_independently(self, estimator):
        for snapshot in estimator.estimate(MONDAY_MORNING):
            for section in snapshot.sections:
                assert section.density_level is classify_density(section.density, THRESHOLDS)
                assert section.density == pytest.approx(snapshot.density, rel=0.11)


class TestDemoBandMix:
    """Forced bands guarantee every level appears"""

    @pytest.mark.parametrize("seed", [0, 1, 7, 42, 1234])
    def test_all_four_bands_present(self, seed):
        estimator = CrowdDensityEstimator(EstimatorConfig.create_deterministic_config(seed=seed))
        levels = {s.density_level for s in estimator.estimate(MONDAY_MORNING)}
        assert levels == set(DensityLevel)

    def test_forced_positions(self, estimator):
        snapshots = estimator.estimate(MONDAY_MORNING)

        assert snapshots.level_of('Masjid al-Haram') is DensityLevel.HIGH
        assert snapshots.level_of('Mina') is DensityLevel.MEDIUM
        assert snapshots.level_of('Jamaraat Bridge') is DensityLevel.CRITICAL
        assert snapshots.level_of('Arafat') is DensityLevel.LOW

    def test_forced_bands_ignore_conditions(self, estimator):
        snapshots = estimator.estimate(MONDAY_MORNING, weather='rain', event='stoning_ritual')
        assert snapshots.level_of('Jamaraat Bridge') is DensityLevel.CRITICAL
        assert snapshots.level_of('Arafat') is DensityLevel.LOW

    def test_targets_that_can_leave_their_band_are_rejected(self):
        config = EstimatorConfig(demo_band_targets={
            'low': 0.29, 'medium': 0.55, 'high': 1.15, 'critical': 2.5
        })
        with pytest.raises(ValueError):
            config.validate()


class TestNaturalModel:
    """Per-site behaviour curves without forced bands"""

    def test_arafat_busier_on_main_ritual_day(self):
        config = EstimatorConfig.create_natural_config(seed=3)
        ordinary = CrowdDensityEstimator(config).estimate(MONDAY_MORNING, event='ordinary_day')
        ritual = CrowdDensityEstimator(config).estimate(MONDAY_MORNING, event='main_ritual_day')

        assert ritual.get('Arafat').density > ordinary.get('Arafat').density

    def test_rain_thins_crowds(self):
        config = EstimatorConfig.create_natural_config(seed=5)
        normal = CrowdDensityEstimator(config).estimate(MONDAY_MORNING, weather='normal')
        rain = CrowdDensityEstimator(config).estimate(MONDAY_MORNING, weather='rain')

        assert rain.total_crowd < normal.total_crowd


class TestReproducibility:
    """Seeded generators"""

    def test_same_seed_same_snapshots(self):
        config = EstimatorConfig.create_deterministic_config(seed=99)
        first = CrowdDensityEstimator(config).estimate(MONDAY_MORNING)
        second = CrowdDensityEstimator(config).estimate(MONDAY_MORNING)
        assert first == second

    def test_convenience_function(self):
        snapshots = estimate_densities(MONDAY_MORNING, config=EstimatorConfig(seed=1))
        assert len(snapshots) == 8
