"""
Configuration management for congestion-aware routing.
"""

from .routing_config import RoutingConfig
from .estimator_config import EstimatorConfig
from .service_config import ServiceConfig

__all__ = [
    'RoutingConfig',
    'EstimatorConfig',
    'ServiceConfig'
]
