"""
Data types and static site data for congestion-aware routing.

This module contains:
- Density levels and immutable density snapshots
- The site catalog and walking-distance table
"""

from .models import (
    DensityLevel,
    DensitySnapshot,
    Location,
    Section,
    SectionSnapshot,
    SnapshotSet,
    classify_density
)
from .locations import (
    DISTANCE_TABLE,
    LOCATION_CATALOG,
    get_distance,
    get_location,
    location_names
)

__all__ = [
    'DensityLevel',
    'DensitySnapshot',
    'Location',
    'Section',
    'SectionSnapshot',
    'SnapshotSet',
    'classify_density',
    'DISTANCE_TABLE',
    'LOCATION_CATALOG',
    'get_distance',
    'get_location',
    'location_names'
]
