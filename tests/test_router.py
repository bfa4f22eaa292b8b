"""
Congestion-Aware Router Tests

Covers path selection under density penalties, travel time, aggregate
congestion, invalid requests and graph construction.
"""

from itertools import permutations

import pytest

from crowd_aware_routing.algorithms import (
    CongestionAwareRouter,
    InvalidRoute,
    InvalidRouteReason,
    compute_route
)
from crowd_aware_routing.config import RoutingConfig
from crowd_aware_routing.data import DensityLevel, SnapshotSet

from conftest import MONDAY_MORNING, levels_with

CANONICAL_SITES = ["Masjid al-Haram", "Mina", "Jamaraat Bridge", "Arafat", "Muzdalifah"]


class TestRouteSelection:
    """Least-congested path choice"""

    def test_low_to_critical_direct_hop(self, router, critical_jamaraat):
        route = router.find_route('Mina', 'Jamaraat Bridge', critical_jamaraat)

        assert route.path == ('Mina', 'Jamaraat Bridge')
        assert route.total_distance_km == pytest.approx(1.8)
        assert route.congestion_level is DensityLevel.CRITICAL
        assert route.speed_multiplier == 0.3
        assert route.adjusted_speed_kmh == pytest.approx(1.2)
        assert route.duration_minutes == 90
        assert route.crowd_impact == "significant"
        assert ("⚠️ Warning: Extremely high crowd density at your destination (Jamaraat Bridge)"
                in route.directions)

    def test_all_low_takes_shortest_path(self, router, all_low):
        route = router.find_route('Muzdalifah', 'Masjid al-Haram', all_low)

        assert route.path == ('Muzdalifah', 'Mina', 'Masjid al-Haram')
        assert route.via == ['Mina']
        assert route.total_distance_km == pytest.approx(9.7)
        assert route.duration_minutes == 146
        assert route.congestion_level is DensityLevel.LOW
        assert route.crowd_impact == "moderate"
        assert "This route avoids high crowd density areas" in route.directions

    @pytest.mark.parametrize("start, destination", list(permutations(CANONICAL_SITES, 2)))
    def test_all_low_routes_are_calm(self, router, all_low, start, destination):
        route = router.find_route(start, destination, all_low)

        assert route.congestion_level is DensityLevel.LOW
        assert "This route avoids high crowd density areas" in route.directions
        assert not any("Warning" in line for line in route.directions)

    def test_multi_hop_narrates_hops_after_first_stop(self, router, all_low):
        route = router.find_route('Muzdalifah', 'Masjid al-Haram', all_low)

        assert [line for line in route.directions if line.startswith("Continue to")] == [
            "Continue to Masjid al-Haram (low crowd density) - 6.2 km",
        ]

    def test_detours_around_congested_site(self, router):
        snapshots = SnapshotSet.from_levels(levels_with({'Mina': DensityLevel.HIGH}))
        route = router.find_route('Muzdalifah', 'Masjid al-Haram', snapshots)

        assert route.path == ('Muzdalifah', 'Jamaraat Bridge', 'Masjid al-Haram')
        assert route.total_distance_km == pytest.approx(12.4)
        assert route.congestion_level is DensityLevel.LOW
        assert route.duration_minutes == 186

    def test_distance_only_config_ignores_crowding(self):
        router = CongestionAwareRouter(RoutingConfig.create_distance_only_config())
        snapshots = SnapshotSet.from_levels(levels_with({'Mina': DensityLevel.HIGH}))
        route = router.find_route('Muzdalifah', 'Masjid al-Haram', snapshots)

        assert route.path == ('Muzdalifah', 'Mina', 'Masjid al-Haram')
        assert route.congestion_level is DensityLevel.HIGH
        assert route.adjusted_speed_kmh == pytest.approx(2.0)
        assert route.duration_minutes == 291

    def test_shorter_final_hop_into_critical_destination(self, router):
        # 3.5 + 8.2 x 5 beats 14.3 x 5
        snapshots = SnapshotSet.from_levels(levels_with({'Arafat': DensityLevel.CRITICAL}))
        route = router.find_route('Mina', 'Arafat', snapshots)

        assert route.path == ('Mina', 'Muzdalifah', 'Arafat')
        assert route.total_distance_km == pytest.approx(11.7)
        assert route.congestion_level is DensityLevel.CRITICAL

    def test_metric_table_detour_is_not_shorter_than_direct(self):
        table = {
            'Mina': {'Arafat': 2.0, 'Muzdalifah': 3.5},
            'Arafat': {'Muzdalifah': 2.0}
        }
        router = CongestionAwareRouter(distance_table=table)
        snapshots = SnapshotSet.from_levels(levels_with({'Muzdalifah': DensityLevel.CRITICAL}))
        route = router.find_route('Mina', 'Muzdalifah', snapshots)

        assert route.path == ('Mina', 'Arafat', 'Muzdalifah')
        assert route.total_distance_km >= 3.5

    def test_aggregate_is_worst_node_on_path(self, router):
        snapshots = SnapshotSet.from_levels(levels_with({
            'Mina': DensityLevel.MEDIUM,
            'Jamaraat Bridge': DensityLevel.HIGH
        }))
        route = router.find_route('Mina', 'Jamaraat Bridge', snapshots)

        assert route.congestion_level is DensityLevel.HIGH
        assert route.speed_multiplier == 0.5
        assert route.duration_minutes == 54

    def test_same_inputs_give_same_route(self, router, critical_jamaraat):
        first = router.find_route('Mina', 'Jamaraat Bridge', critical_jamaraat)
        second = router.find_route('Mina', 'Jamaraat Bridge', critical_jamaraat)
        assert first == second


class TestDirectFallback:
    """Direct edge used when the weighted search finds nothing"""

    def test_falls_back_to_direct_edge(self, router, all_low, monkeypatch):
        monkeypatch.setattr(router, '_search', lambda graph, start, destination: None)
        route = router.find_route('Mina', 'Arafat', all_low)

        assert route.path == ('Mina', 'Arafat')
        assert route.algorithm == "direct_fallback"
        assert route.total_distance_km == pytest.approx(14.3)
        assert route.to_dict()['algorithm'] == "direct_fallback"

    def test_fallback_disabled_raises_no_path(self, all_low, monkeypatch):
        router = CongestionAwareRouter(RoutingConfig(fallback_to_direct=False))
        monkeypatch.setattr(router, '_search', lambda graph, start, destination: None)

        with pytest.raises(InvalidRoute) as exc_info:
            router.find_route('Mina', 'Arafat', all_low)
        assert exc_info.value.reason is InvalidRouteReason.NO_PATH

    def test_no_direct_edge_raises_no_path(self, all_low, monkeypatch):
        router = CongestionAwareRouter(distance_table={
            'Mina': {'Arafat': 2.0},
            'Arafat': {'Muzdalifah': 2.0}
        })
        monkeypatch.setattr(router, '_search', lambda graph, start, destination: None)

        with pytest.raises(InvalidRoute) as exc_info:
            router.find_route('Mina', 'Muzdalifah', all_low)
        assert exc_info.value.reason is InvalidRouteReason.NO_PATH


class TestMissingDensity:
    """Sites without a reading count as low"""

    def test_partial_snapshot_treated_as_low(self, router):
        snapshots = SnapshotSet.from_levels({'Jamaraat Bridge': DensityLevel.CRITICAL})
        route = router.find_route('Mina', 'Jamaraat Bridge', snapshots)

        assert route.congestion_level is DensityLevel.CRITICAL
        assert router.resolve_levels(snapshots)['Mina'] is DensityLevel.LOW

    def test_no_snapshots_at_all(self, router):
        route = router.find_route('Mina', 'Jamaraat Bridge', None)
        assert route.congestion_level is DensityLevel.LOW
        assert route.duration_minutes == 27


class TestInvalidRoutes:
    """Rejected route requests"""

    def test_same_location(self, router, all_low):
        with pytest.raises(InvalidRoute) as exc_info:
            router.find_route('Mina', 'Mina', all_low)
        assert exc_info.value.reason is InvalidRouteReason.SAME_LOCATION

    def test_same_check_precedes_unknown_check(self, router, all_low):
        with pytest.raises(InvalidRoute) as exc_info:
            router.find_route('Atlantis', 'Atlantis', all_low)
        assert exc_info.value.reason is InvalidRouteReason.SAME_LOCATION

    def test_unknown_location(self, router, all_low):
        with pytest.raises(InvalidRoute) as exc_info:
            router.find_route('Mina', 'Atlantis', all_low)
        assert exc_info.value.reason is InvalidRouteReason.UNKNOWN_LOCATION
        assert 'Atlantis' in exc_info.value.message

    def test_disconnected_site_has_no_path(self, router, all_low):
        with pytest.raises(InvalidRoute) as exc_info:
            router.find_route('Mina', 'Tent City Section A', all_low)
        assert exc_info.value.reason is InvalidRouteReason.NO_PATH

    def test_invalid_route_is_a_value_error(self, router, all_low):
        with pytest.raises(ValueError):
            compute_route('Mina', 'Mina', all_low)


class TestGraphConstruction:
    """Static graph and tie-breaking"""

    def test_catalog_sites_are_nodes(self, router):
        assert router.static_graph.number_of_nodes() == 8
        assert router.static_graph.number_of_edges() == 10

    def test_malformed_entries_are_skipped(self):
        table = {
            'Mina': {
                'Arafat': -1,
                'Nowhere': 2.0,
                'Mina': 1.0,
                'Muzdalifah': 'abc',
                'Jamaraat Bridge': 1.8
            }
        }
        router = CongestionAwareRouter(distance_table=table)
        assert router.static_graph.number_of_edges() == 1
        assert router.static_graph.has_edge('Mina', 'Jamaraat Bridge')

    def test_one_sided_entry_is_symmetric(self):
        router = CongestionAwareRouter(distance_table={'Mina': {'Arafat': 3.0}})
        route = router.find_route('Arafat', 'Mina', None)
        assert route.path == ('Arafat', 'Mina')

    def test_equal_cost_prefers_fewest_hops(self):
        table = {
            'Mina': {'Arafat': 2.0, 'Jamaraat Bridge': 2.0, 'Muzdalifah': 4.0},
            'Arafat': {'Muzdalifah': 2.0},
            'Jamaraat Bridge': {'Muzdalifah': 2.0}
        }
        router = CongestionAwareRouter(distance_table=table)
        route = router.find_route('Mina', 'Muzdalifah', None)
        assert route.path == ('Mina', 'Muzdalifah')

    def test_equal_cost_equal_hops_is_lexicographic(self):
        table = {
            'Mina': {'Jamaraat Bridge': 2.0, 'Arafat': 2.0},
            'Arafat': {'Muzdalifah': 2.0},
            'Jamaraat Bridge': {'Muzdalifah': 2.0}
        }
        router = CongestionAwareRouter(distance_table=table)
        route = router.find_route('Mina', 'Muzdalifah', None)
        assert route.path == ('Mina', 'Arafat', 'Muzdalifah')

    def test_weighted_graph_penalises_destination_node(self, router):
        levels = router.resolve_levels(SnapshotSet.from_levels(
            levels_with({'Jamaraat Bridge': DensityLevel.CRITICAL})
        ))
        graph = router.build_weighted_graph(levels)

        assert graph.edges['Mina', 'Jamaraat Bridge']['weighted_length'] == pytest.approx(9.0)
        assert graph.edges['Jamaraat Bridge', 'Mina']['weighted_length'] == pytest.approx(1.8)


class TestRouteOutput:
    """Serialised route forms"""

    def test_to_dict(self, router, critical_jamaraat):
        data = router.find_route('Mina', 'Jamaraat Bridge', critical_jamaraat).to_dict()

        assert data['path'] == ['Mina', 'Jamaraat Bridge']
        assert data['via'] == []
        assert data['distance'] == "1.8 km"
        assert data['duration'] == "90 minutes"
        assert data['congestion_level'] == "critical"
        assert data['adjusted_walking_speed'] == "1.2 km/h"
        assert data['pilgrim_count_range'] == "250,000-350,000"
        assert data['algorithm'] == "dijkstra"

    def test_to_geojson(self, router, all_low):
        collection = router.find_route('Muzdalifah', 'Masjid al-Haram', all_low).to_geojson()

        assert collection['type'] == 'FeatureCollection'
        line, start, end = collection['features']
        assert len(line['geometry']['coordinates']) == 3
        assert start['properties']['name'] == 'Muzdalifah'
        assert end['properties']['name'] == 'Masjid al-Haram'
        # GeoJSON is [lon, lat]
        assert line['geometry']['coordinates'][0] == pytest.approx([39.936322, 21.383082])

    def test_calculation_time_recorded(self, router, all_low):
        route = router.find_route('Mina', 'Arafat', all_low)
        assert route.calculation_time_ms is not None
        assert route.calculation_time_ms >= 0


def test_timestamps_do_not_affect_routing(router):
    early = SnapshotSet.from_levels(levels_with(), generated_at=MONDAY_MORNING)
    late = SnapshotSet.from_levels(levels_with())
    assert (router.find_route('Mina', 'Arafat', early).path
            == router.find_route('Mina', 'Arafat', late).path)
