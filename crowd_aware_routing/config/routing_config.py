"""
Configuration management for congestion-aware routing parameters.
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class RoutingConfig:
    """Configuration parameters for congestion-aware routing."""

    # Edge penalties keyed by the destination node's density level
    density_penalties: Dict[str, float] = field(default_factory=lambda: {
        'low': 1.0,
        'medium': 1.8,
        'high': 3.0,
        'critical': 5.0
    })

    # Walking speed
    avg_walking_speed_kmh: float = 4.0
    speed_multipliers: Dict[str, float] = field(default_factory=lambda: {
        'low': 1.0,
        'medium': 0.7,
        'high': 0.5,
        'critical': 0.3
    })
    significant_impact_threshold: float = 0.8  # multipliers below this are "significant"

    # Algorithm Behavior
    fallback_to_direct: bool = True  # use the direct edge if the search finds nothing

    # Reporting
    pilgrim_count_range: str = "250,000-350,000"

    def validate(self) -> None:
        """Validate configuration parameters."""
        levels = ('low', 'medium', 'high', 'critical')
        for name, table in (('density_penalties', self.density_penalties),
                            ('speed_multipliers', self.speed_multipliers)):
            missing = [level for level in levels if level not in table]
            if missing:
                raise ValueError(f"{name} missing levels: {missing}")

        penalties = [self.density_penalties[level] for level in levels]
        if any(p <= 0 for p in penalties):
            raise ValueError("density_penalties must be positive")
        if penalties != sorted(penalties):
            raise ValueError("density_penalties must increase with density level")

        multipliers = [self.speed_multipliers[level] for level in levels]
        if any(not 0 < m <= 1.0 for m in multipliers):
            raise ValueError("speed_multipliers must be in (0, 1]")
        if multipliers != sorted(multipliers, reverse=True):
            raise ValueError("speed_multipliers must decrease with density level")

        if self.avg_walking_speed_kmh <= 0:
            raise ValueError("avg_walking_speed_kmh must be positive")

    @classmethod
    def create_default_config(cls) -> 'RoutingConfig':
        """Create the default configuration."""
        return cls()

    @classmethod
    def create_crowd_averse_config(cls) -> 'RoutingConfig':
        """
        Create configuration that avoids crowded sites more aggressively.

        Penalties grow faster so that longer detours around high and critical
        sites win more often.
        """
        return cls(
            density_penalties={
                'low': 1.0,
                'medium': 2.5,
                'high': 5.0,
                'critical': 10.0
            }
        )

    @classmethod
    def create_distance_only_config(cls) -> 'RoutingConfig':
        """Create configuration that ignores crowding when choosing a path."""
        return cls(
            density_penalties={
                'low': 1.0,
                'medium': 1.0,
                'high': 1.0,
                'critical': 1.0
            }
        )
