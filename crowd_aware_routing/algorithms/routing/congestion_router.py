"""
Dijkstra routing over the site graph with crowd-density edge penalties.
"""

import logging
import math
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import geojson
import networkx as nx

from ...config.routing_config import RoutingConfig
from ...data.locations import DISTANCE_TABLE, LOCATION_CATALOG
from ...data.models import DensityLevel, Location, SnapshotSet
from .directions import build_directions

logger = logging.getLogger(__name__)


class InvalidRouteReason(Enum):
    """Why a route request cannot be answered."""
    SAME_LOCATION = "same_location"
    UNKNOWN_LOCATION = "unknown_location"
    NO_PATH = "no_path"


class InvalidRoute(ValueError):
    """Route request that cannot be satisfied: same, unknown or disconnected locations."""

    def __init__(self, reason: InvalidRouteReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


@dataclass(frozen=True)
class RouteResult:
    """Least-congested route between two sites with derived guidance."""
    start: str
    destination: str
    path: Tuple[str, ...]
    total_distance_km: float
    duration_minutes: int
    congestion_level: DensityLevel
    speed_multiplier: float
    adjusted_speed_kmh: float
    directions: Tuple[str, ...]
    coordinates: Tuple[Tuple[float, float], ...] = ()  # (lat, lon) per path node
    algorithm: str = "dijkstra"
    pilgrim_count_range: str = ""
    crowd_impact: str = "moderate"
    calculation_time_ms: Optional[float] = field(default=None, compare=False)

    @property
    def via(self) -> List[str]:
        """Intermediate sites between start and destination."""
        return list(self.path[1:-1])

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start': self.start,
            'destination': self.destination,
            'path': list(self.path),
            'via': self.via,
            'distance_km': round(self.total_distance_km, 1),
            'distance': f"{self.total_distance_km:.1f} km",
            'duration_minutes': self.duration_minutes,
            'duration': f"{self.duration_minutes} minutes",
            'congestion_level': self.congestion_level.value,
            'speed_multiplier': self.speed_multiplier,
            'adjusted_walking_speed_kmh': round(self.adjusted_speed_kmh, 2),
            'adjusted_walking_speed': f"{self.adjusted_speed_kmh:.1f} km/h",
            'crowd_impact': self.crowd_impact,
            'pilgrim_count_range': self.pilgrim_count_range,
            'directions': list(self.directions),
            'algorithm': self.algorithm
        }

    def to_geojson(self) -> geojson.FeatureCollection:
        """
        Convert the route to a GeoJSON FeatureCollection.

        The line joins the sites' catalog coordinates; it is not street geometry.
        """
        geojson_coords = [[lon, lat] for lat, lon in self.coordinates]

        line_feature = geojson.Feature(
            geometry=geojson.LineString(geojson_coords),
            properties={
                'algorithm': self.algorithm,
                'path': list(self.path),
                'total_distance_km': round(self.total_distance_km, 1),
                'duration_minutes': self.duration_minutes,
                'congestion_level': self.congestion_level.value
            }
        )
        start_feature = geojson.Feature(
            geometry=geojson.Point(geojson_coords[0]),
            properties={'type': 'start', 'name': self.start}
        )
        end_feature = geojson.Feature(
            geometry=geojson.Point(geojson_coords[-1]),
            properties={'type': 'end', 'name': self.destination}
        )
        return geojson.FeatureCollection([line_feature, start_feature, end_feature])


class CongestionAwareRouter:
    """
    Least-congested routing between named sites.

    Edge weight = static distance x penalty of the destination node's density
    level. The static graph is built once; weights are re-derived from the
    snapshot set on every request, so the router carries no per-request state.
    """

    def __init__(self, config: Optional[RoutingConfig] = None,
                 distance_table: Optional[Dict[str, Dict[str, float]]] = None,
                 locations: Sequence[Location] = LOCATION_CATALOG):
        """
        Initialize the router.

        Args:
            config: Routing configuration parameters
            distance_table: Adjacency table of walking distances in km
            locations: Site catalog; every entry becomes a graph node
        """
        self.config = config or RoutingConfig()
        self.config.validate()
        self.locations: Dict[str, Location] = {loc.name: loc for loc in locations}
        self.static_graph = self._build_static_graph(
            DISTANCE_TABLE if distance_table is None else distance_table
        )

        logger.info(f"CongestionAwareRouter initialized: {self.static_graph.number_of_nodes()} sites, "
                    f"{self.static_graph.number_of_edges()} direct paths")

    def _build_static_graph(self, distance_table: Dict[str, Dict[str, float]]) -> nx.Graph:
        """Undirected distance graph; malformed table entries are skipped."""
        graph = nx.Graph()
        for name, location in self.locations.items():
            graph.add_node(name, y=location.latitude, x=location.longitude)

        for origin, neighbours in distance_table.items():
            for target, distance in (neighbours or {}).items():
                if origin not in graph or target not in graph:
                    logger.warning(f"Skipping edge {origin} -> {target}: site not in catalog")
                    continue
                if origin == target:
                    logger.warning(f"Skipping self-loop at {origin}")
                    continue
                try:
                    length = float(distance)
                except (TypeError, ValueError):
                    logger.warning(f"Skipping edge {origin} -> {target}: bad distance {distance!r}")
                    continue
                if not math.isfinite(length) or length <= 0:
                    logger.warning(f"Skipping edge {origin} -> {target}: bad distance {distance!r}")
                    continue

                if graph.has_edge(origin, target) and graph.edges[origin, target]['length'] != length:
                    logger.warning(f"Conflicting distances for {origin} <-> {target}; "
                                   f"keeping {graph.edges[origin, target]['length']} km")
                    continue
                graph.add_edge(origin, target, length=length)

        return graph

    def resolve_levels(self, snapshots: Optional[SnapshotSet]) -> Dict[str, DensityLevel]:
        """
        Density level per graph node.

        Sites missing from the snapshot set are treated as low.
        """
        levels = {}
        missing = []
        for node in self.static_graph.nodes:
            level = None
            if snapshots is not None:
                try:
                    level = snapshots.level_of(node)
                except Exception as e:
                    logger.warning(f"Could not read density for {node}: {e}")
            if level is None:
                missing.append(node)
                level = DensityLevel.LOW
            levels[node] = level

        if missing:
            logger.warning(f"Partial snapshot: no density for {missing}, assuming low")
        return levels

    def build_weighted_graph(self, levels: Dict[str, DensityLevel]) -> nx.DiGraph:
        """Directed graph with 'weighted_length' = distance x destination-node penalty."""
        weighted = nx.DiGraph()
        weighted.add_nodes_from(self.static_graph.nodes(data=True))

        for u, v, data in self.static_graph.edges(data=True):
            length = data['length']
            for origin, target in ((u, v), (v, u)):
                level = levels.get(target, DensityLevel.LOW)
                penalty = self.config.density_penalties.get(level.value, 1.0)
                weighted.add_edge(
                    origin, target,
                    length=length,
                    weighted_length=length * penalty,
                    density_level=level.value
                )
        return weighted

    def find_route(self, start: str, destination: str,
                   snapshots: Optional[SnapshotSet]) -> RouteResult:
        """
        Find the least-congested route between two sites.

        Args:
            start: Starting site name
            destination: Destination site name
            snapshots: Current density snapshot set

        Returns:
            RouteResult with path, duration, congestion and directions

        Raises:
            InvalidRoute: Same start and destination, unknown site, or no path
        """
        if start == destination:
            raise InvalidRoute(
                InvalidRouteReason.SAME_LOCATION,
                f"Start and destination are the same location ({start})"
            )
        unknown = [name for name in (start, destination) if name not in self.static_graph]
        if unknown:
            raise InvalidRoute(
                InvalidRouteReason.UNKNOWN_LOCATION,
                f"Unknown location(s): {', '.join(unknown)}"
            )

        start_time = time.time()
        levels = self.resolve_levels(snapshots)
        graph = self.build_weighted_graph(levels)

        algorithm = "dijkstra"
        path = self._search(graph, start, destination)
        if path is None:
            path = self._direct_fallback(start, destination)
            algorithm = "direct_fallback"

        route = self._assemble_route(path, levels, algorithm)
        route_time_ms = (time.time() - start_time) * 1000
        route = replace(route, calculation_time_ms=route_time_ms)

        logger.info(f"Route found: {' -> '.join(path)}, {route.total_distance_km:.1f} km, "
                    f"{route.congestion_level.value} congestion, "
                    f"calculated in {route_time_ms:.1f}ms")
        return route

    def _search(self, graph: nx.DiGraph, start: str, destination: str) -> Optional[List[str]]:
        """
        Minimum-penalty path, or None when the graph has none.

        Equal-cost paths are broken by fewest hops, then by the lexicographic
        order of their node names.
        """
        try:
            candidates = list(nx.all_shortest_paths(
                graph, start, destination, weight='weighted_length', method='dijkstra'
            ))
        except nx.NetworkXNoPath:
            logger.warning(f"No weighted path from {start} to {destination}")
            return None

        if len(candidates) > 1:
            logger.debug(f"{len(candidates)} equal-cost paths from {start} to {destination}")
        return min(candidates, key=lambda p: (len(p), p))

    def _direct_fallback(self, start: str, destination: str) -> List[str]:
        if self.config.fallback_to_direct and self.static_graph.has_edge(start, destination):
            logger.warning(f"Using direct path fallback {start} -> {destination}")
            return [start, destination]
        raise InvalidRoute(
            InvalidRouteReason.NO_PATH,
            f"No route available between {start} and {destination}"
        )

    def _assemble_route(self, path: List[str], levels: Dict[str, DensityLevel],
                        algorithm: str) -> RouteResult:
        start, destination = path[0], path[-1]

        hop_distances = [
            self.static_graph.edges[u, v]['length'] for u, v in zip(path, path[1:])
        ]
        total_distance = sum(hop_distances)

        def level_of(name: str) -> DensityLevel:
            return levels.get(name, DensityLevel.LOW)

        congestion = DensityLevel.worst(level_of(node) for node in path)
        speed_multiplier = self.config.speed_multipliers[congestion.value]
        adjusted_speed = self.config.avg_walking_speed_kmh * speed_multiplier

        # round away float noise before taking the ceiling
        duration_minutes = math.ceil(round(total_distance / adjusted_speed * 60, 6))

        directions = build_directions(path, hop_distances, level_of, congestion)

        coordinates = tuple(
            (self.static_graph.nodes[node].get('y', 0.0), self.static_graph.nodes[node].get('x', 0.0))
            for node in path
        )

        return RouteResult(
            start=start,
            destination=destination,
            path=tuple(path),
            total_distance_km=total_distance,
            duration_minutes=duration_minutes,
            congestion_level=congestion,
            speed_multiplier=speed_multiplier,
            adjusted_speed_kmh=adjusted_speed,
            directions=tuple(directions),
            coordinates=coordinates,
            algorithm=algorithm,
            pilgrim_count_range=self.config.pilgrim_count_range,
            crowd_impact=("significant" if speed_multiplier < self.config.significant_impact_threshold
                          else "moderate")
        )


def compute_route(start: str, destination: str, snapshots: Optional[SnapshotSet],
                  config: Optional[RoutingConfig] = None) -> RouteResult:
    """
    Convenience function: route with a router over the default site graph.

    Raises:
        InvalidRoute: Same start and destination, unknown site, or no path
    """
    return CongestionAwareRouter(config).find_route(start, destination, snapshots)
