"""
Configuration for the synthetic crowd density estimator.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple


@dataclass
class EstimatorConfig:
    """Configuration parameters for crowd density estimation."""

    # Total pilgrims on site
    total_pilgrims_min: int = 250000
    total_pilgrims_max: int = 350000

    # People per square meter, upper bounds of low / medium / high
    density_thresholds: Tuple[float, float, float] = (0.3, 0.8, 1.5)

    # Hour-of-day multipliers
    time_modifiers: Dict[str, float] = field(default_factory=lambda: {
        'before_prayer': 2.0,
        'during_prayer': 2.5,
        'after_prayer': 1.8,
        'jamarat': 3.0,
        'tawaf': 2.5,
        'night': 0.7,
        'early_morning': 0.8,
        'hajj_day': 3.0
    })
    prayer_hours: FrozenSet[int] = frozenset({5, 12, 15, 18, 20})
    after_prayer_hours: FrozenSet[int] = frozenset({6, 13, 16, 19, 21})
    before_prayer_hours: FrozenSet[int] = frozenset({4, 11, 14, 17, 19})
    jamarat_hours: FrozenSet[int] = frozenset({6, 7, 8, 13, 14, 15, 16})
    tawaf_hours: FrozenSet[int] = frozenset({5, 6, 7, 21, 22, 23})

    # Weather multipliers, also used for the hour-of-day temperature proxy
    weather_modifiers: Dict[str, float] = field(default_factory=lambda: {
        'hot': 0.9,
        'rain': 0.7,
        'pleasant': 1.2,
        'normal': 1.0
    })

    # Calendar rule for the main ritual day
    ritual_weekday: int = 4  # Friday
    ritual_minute_modulus: Optional[int] = 3  # None disables the minute rule

    # Jitter
    occupancy_jitter: float = 0.05  # +/- fraction applied to location occupancy
    section_jitter: float = 0.10    # +/- fraction applied to section density
    coordinate_jitter_deg: float = 0.00025

    # Demo band mix: every Nth location is forced into a fixed band
    demo_band_mix: bool = True
    demo_band_cycle: Tuple[Optional[str], ...] = ('high', 'medium', 'critical', 'low', None)
    demo_band_targets: Dict[str, float] = field(default_factory=lambda: {
        'low': 0.15,
        'medium': 0.55,
        'high': 1.15,
        'critical': 2.5
    })

    # Random seed for reproducible runs (None = fresh entropy)
    seed: Optional[int] = None

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.total_pilgrims_min <= 0 or self.total_pilgrims_max < self.total_pilgrims_min:
            raise ValueError("total_pilgrims range must be positive and ordered")

        low, medium, high = self.density_thresholds
        if not 0 < low < medium < high:
            raise ValueError("density_thresholds must be positive and strictly ascending")

        if not 0 <= self.occupancy_jitter < 1:
            raise ValueError("occupancy_jitter must be in [0, 1)")
        if not 0 <= self.section_jitter < 1:
            raise ValueError("section_jitter must be in [0, 1)")

        if not 0 <= self.ritual_weekday <= 6:
            raise ValueError("ritual_weekday must be 0 (Monday) to 6 (Sunday)")
        if self.ritual_minute_modulus is not None and self.ritual_minute_modulus <= 0:
            raise ValueError("ritual_minute_modulus must be positive or None")

        if self.demo_band_mix:
            if not self.demo_band_cycle:
                raise ValueError("demo_band_cycle must not be empty")
            self._validate_band_targets()

    def _validate_band_targets(self) -> None:
        """Each forced band target must stay inside its band after jitter."""
        low, medium, high = self.density_thresholds
        bands = {
            'low': (0.0, low),
            'medium': (low, medium),
            'high': (medium, high),
            'critical': (high, float('inf'))
        }
        lo_factor = 1.0 - self.occupancy_jitter
        hi_factor = 1.0 + self.occupancy_jitter

        for band in self.demo_band_cycle:
            if band is None:
                continue
            if band not in self.demo_band_targets:
                raise ValueError(f"No demo target density for band '{band}'")
            target = self.demo_band_targets[band]
            lower, upper = bands[band]
            if not (target * lo_factor > lower and target * hi_factor <= upper):
                raise ValueError(f"Demo target {target} for '{band}' can leave its band under jitter")

    @classmethod
    def create_default_config(cls) -> 'EstimatorConfig':
        """Create the default configuration (demo band mix on)."""
        return cls()

    @classmethod
    def create_natural_config(cls, seed: Optional[int] = None) -> 'EstimatorConfig':
        """
        Create configuration without the demo band mix.

        Every location follows its own behaviour curve; bands are whatever
        the model produces.
        """
        return cls(demo_band_mix=False, seed=seed)

    @classmethod
    def create_deterministic_config(cls, seed: int = 0,
                                    demo_band_mix: bool = True) -> 'EstimatorConfig':
        """Create a seeded configuration for reproducible tests and demos."""
        return cls(seed=seed, demo_band_mix=demo_band_mix)
