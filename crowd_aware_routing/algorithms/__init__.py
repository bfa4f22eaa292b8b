"""
Routing algorithms.

This module contains:
- Congestion-weighted Dijkstra routing with direct-path fallback
- Narrated directions and the turn-by-turn lookup table
"""

from .routing import (
    CongestionAwareRouter,
    InvalidRoute,
    InvalidRouteReason,
    RouteResult,
    compute_route
)

__all__ = [
    'CongestionAwareRouter',
    'InvalidRoute',
    'InvalidRouteReason',
    'RouteResult',
    'compute_route'
]
