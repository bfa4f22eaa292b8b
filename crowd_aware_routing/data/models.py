"""
Core data types: locations, density levels and immutable density snapshots.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple


class DensityLevel(Enum):
    """Qualitative crowd density, ordered from calmest to worst."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    @property
    def is_congested(self) -> bool:
        """High and critical count as congested for warnings."""
        return self.rank >= DensityLevel.HIGH.rank

    @classmethod
    def worst(cls, levels: Iterable['DensityLevel']) -> 'DensityLevel':
        """Return the highest-ranked level, LOW for an empty iterable."""
        return max(levels, key=lambda level: level.rank, default=cls.LOW)


_LEVEL_ORDER: List[DensityLevel] = [
    DensityLevel.LOW, DensityLevel.MEDIUM, DensityLevel.HIGH, DensityLevel.CRITICAL
]


def classify_density(density: float, thresholds: Sequence[float]) -> DensityLevel:
    """
    Classify people-per-square-meter into a density level.

    Args:
        density: People per square meter
        thresholds: Ascending upper bounds for low, medium and high

    Returns:
        DensityLevel for the given density
    """
    low, medium, high = thresholds
    if density <= low:
        return DensityLevel.LOW
    if density <= medium:
        return DensityLevel.MEDIUM
    if density <= high:
        return DensityLevel.HIGH
    return DensityLevel.CRITICAL


@dataclass(frozen=True)
class Section:
    """Named sub-area of a location holding a fixed share of its crowd."""
    section_id: str
    name: str
    percentage: float


@dataclass(frozen=True)
class Location:
    """Static catalog entry for a physical site."""
    name: str
    latitude: float
    longitude: float
    area_m2: float
    capacity: int
    sections: Tuple[Section, ...] = ()


@dataclass(frozen=True)
class SectionSnapshot:
    """Density reading for one section of a location."""
    section_id: str
    name: str
    density: float
    density_level: DensityLevel
    crowd_size: int
    occupancy: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.section_id,
            'name': self.name,
            'density': self.density,
            'density_level': self.density_level.value,
            'crowd_size': self.crowd_size,
            'occupancy': self.occupancy
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SectionSnapshot':
        return cls(
            section_id=data['id'],
            name=data['name'],
            density=float(data['density']),
            density_level=DensityLevel(data['density_level']),
            crowd_size=int(data['crowd_size']),
            occupancy=float(data.get('occupancy', 0.0))
        )


@dataclass(frozen=True)
class DensitySnapshot:
    """Density reading for one location at one instant."""
    location_name: str
    latitude: float
    longitude: float
    occupancy: float
    density: float
    density_level: DensityLevel
    crowd_size: int
    capacity: int
    sections: Tuple[SectionSnapshot, ...]
    timestamp: datetime
    current_total_pilgrims: int

    @property
    def occupancy_percentage(self) -> float:
        return round(self.occupancy * 100, 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'location_name': self.location_name,
            'coordinates': {'lat': self.latitude, 'lng': self.longitude},
            'occupancy': self.occupancy,
            'occupancy_percentage': self.occupancy_percentage,
            'density': self.density,
            'density_level': self.density_level.value,
            'crowd_size': self.crowd_size,
            'capacity': self.capacity,
            'sections': [section.to_dict() for section in self.sections],
            'timestamp': self.timestamp.isoformat(),
            'meta_data': {
                'current_total_pilgrims': self.current_total_pilgrims
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DensitySnapshot':
        coordinates = data.get('coordinates', {})
        return cls(
            location_name=data['location_name'],
            latitude=float(coordinates.get('lat', 0.0)),
            longitude=float(coordinates.get('lng', 0.0)),
            occupancy=float(data['occupancy']),
            density=float(data['density']),
            density_level=DensityLevel(data['density_level']),
            crowd_size=int(data['crowd_size']),
            capacity=int(data['capacity']),
            sections=tuple(SectionSnapshot.from_dict(s) for s in data.get('sections', [])),
            timestamp=datetime.fromisoformat(data['timestamp']),
            current_total_pilgrims=int(data.get('meta_data', {}).get('current_total_pilgrims', 0))
        )


@dataclass(frozen=True)
class SnapshotSet:
    """
    One full set of per-location density readings valid at a point in time.

    Immutable once built; share freely between concurrent readers and replace
    it wholesale to publish newer readings.
    """
    generated_at: datetime
    total_pilgrims_target: int
    snapshots: Tuple[DensitySnapshot, ...] = ()
    _by_name: Dict[str, DensitySnapshot] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'snapshots', tuple(self.snapshots))
        object.__setattr__(self, '_by_name', {s.location_name: s for s in self.snapshots})

    def __iter__(self) -> Iterator[DensitySnapshot]:
        return iter(self.snapshots)

    def __len__(self) -> int:
        return len(self.snapshots)

    def __contains__(self, location_name: object) -> bool:
        return location_name in self._by_name

    @property
    def location_names(self) -> List[str]:
        return [s.location_name for s in self.snapshots]

    @property
    def total_crowd(self) -> int:
        return sum(s.crowd_size for s in self.snapshots)

    def get(self, location_name: str) -> Optional[DensitySnapshot]:
        return self._by_name.get(location_name)

    def level_of(self, location_name: str) -> Optional[DensityLevel]:
        """Density level for a location, None when the set has no reading for it."""
        snapshot = self._by_name.get(location_name)
        return snapshot.density_level if snapshot else None

    def age_seconds(self, now: datetime) -> float:
        return (now - self.generated_at).total_seconds()

    def is_fresh(self, now: datetime, freshness_seconds: float) -> bool:
        age = self.age_seconds(now)
        return 0 <= age < freshness_seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generated_at': self.generated_at.isoformat(),
            'total_pilgrims_target': self.total_pilgrims_target,
            'snapshots': [s.to_dict() for s in self.snapshots]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SnapshotSet':
        return cls(
            generated_at=datetime.fromisoformat(data['generated_at']),
            total_pilgrims_target=int(data['total_pilgrims_target']),
            snapshots=tuple(DensitySnapshot.from_dict(s) for s in data['snapshots'])
        )

    @classmethod
    def from_levels(cls, levels: Dict[str, DensityLevel],
                    generated_at: Optional[datetime] = None) -> 'SnapshotSet':
        """
        Build a minimal set carrying only density levels.

        Useful for feeding the router with externally sourced levels
        (a live feed, a test scenario) without crowd counts.
        """
        generated_at = generated_at or datetime.now()
        snapshots = tuple(
            DensitySnapshot(
                location_name=name,
                latitude=0.0,
                longitude=0.0,
                occupancy=0.0,
                density=0.0,
                density_level=level,
                crowd_size=0,
                capacity=0,
                sections=(),
                timestamp=generated_at,
                current_total_pilgrims=0
            )
            for name, level in levels.items()
        )
        return cls(generated_at=generated_at, total_pilgrims_target=0, snapshots=snapshots)
