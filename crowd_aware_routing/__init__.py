"""
Crowd-Aware Routing System

Least-congested walking routes between pilgrimage sites, driven by a
time-varying crowd density model.

## Quick Start

```python
from crowd_aware_routing import CongestionAwareRouter, CrowdDensityEstimator

snapshots = CrowdDensityEstimator().estimate()

router = CongestionAwareRouter()
route = router.find_route('Mina', 'Jamaraat Bridge', snapshots)
print(route.duration_minutes, route.congestion_level.value)
```

## Main Components

- **CrowdDensityEstimator**: Synthetic density snapshots for every site
- **CongestionAwareRouter**: Dijkstra routing with density penalties
- **SnapshotCache / SnapshotStore**: Persistent and in-process snapshot reuse
- **RoutingConfig / EstimatorConfig**: Configuration management

## Architecture

- `density/`: Density estimation and time/weather modifiers
- `algorithms/`: Routing and direction narration
- `cache/`: Snapshot caching
- `data/`: Site catalog and data types
- `config/`: Configuration management
"""

from .algorithms import CongestionAwareRouter, InvalidRoute, InvalidRouteReason, RouteResult, compute_route
from .cache import CacheError, SnapshotCache, SnapshotStore
from .config import EstimatorConfig, RoutingConfig, ServiceConfig
from .data import DensityLevel, DensitySnapshot, SnapshotSet
from .density import BaseDensitySource, CrowdDensityEstimator, SpecialEvent, Weather, estimate_densities

# Version information
__version__ = "1.0.0"
__author__ = "Crowd-Aware Routing Team"

# Public API
__all__ = [
    # Main interfaces
    'CongestionAwareRouter',
    'CrowdDensityEstimator',
    'BaseDensitySource',
    'estimate_densities',
    'compute_route',

    # Results and errors
    'RouteResult',
    'InvalidRoute',
    'InvalidRouteReason',
    'CacheError',

    # Data types
    'DensityLevel',
    'DensitySnapshot',
    'SnapshotSet',
    'SpecialEvent',
    'Weather',

    # Caching
    'SnapshotCache',
    'SnapshotStore',

    # Configuration
    'RoutingConfig',
    'EstimatorConfig',
    'ServiceConfig',

    # Metadata
    '__version__',
    '__author__'
]
