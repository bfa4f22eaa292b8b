"""
Host service configuration loaded from environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class ServiceConfig:
    """Configuration for the snapshot store, cache and routing service."""

    cache_path: Optional[str] = None  # None disables the persistent cache
    freshness_seconds: float = 300.0  # snapshot sets older than this are stale
    demo_band_mix: bool = True
    seed: Optional[int] = None

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.freshness_seconds <= 0:
            raise ValueError("freshness_seconds must be positive")

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """
        Build configuration from environment variables.

        CROWD_ROUTING_CACHE_PATH: SQLite file for the snapshot cache
        CROWD_ROUTING_FRESHNESS_SECONDS: freshness window in seconds
        CROWD_ROUTING_DEMO_BANDS: force the demo band mix on/off
        CROWD_ROUTING_SEED: integer seed for the density generator
        """
        seed = os.environ.get('CROWD_ROUTING_SEED')
        config = cls(
            cache_path=os.environ.get('CROWD_ROUTING_CACHE_PATH') or None,
            freshness_seconds=float(os.environ.get('CROWD_ROUTING_FRESHNESS_SECONDS', 300.0)),
            demo_band_mix=_env_bool('CROWD_ROUTING_DEMO_BANDS', True),
            seed=int(seed) if seed else None
        )
        config.validate()
        return config
