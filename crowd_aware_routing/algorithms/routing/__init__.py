"""
Core routing algorithms.
"""

from .congestion_router import (
    CongestionAwareRouter,
    InvalidRoute,
    InvalidRouteReason,
    RouteResult,
    compute_route
)
from .directions import GENERIC_TURN_BY_TURN, TURN_BY_TURN, TurnByTurn, build_directions

__all__ = [
    'CongestionAwareRouter',
    'InvalidRoute',
    'InvalidRouteReason',
    'RouteResult',
    'compute_route',
    'GENERIC_TURN_BY_TURN',
    'TURN_BY_TURN',
    'TurnByTurn',
    'build_directions'
]
