"""
Crowd density estimation.

This module contains:
- The synthetic density estimator and its live-feed interface
- Time, ritual-calendar and weather modifiers
"""

from .estimator import BaseDensitySource, CrowdDensityEstimator, estimate_densities
from .modifiers import SpecialEvent, Weather, parse_event, parse_weather

__all__ = [
    'BaseDensitySource',
    'CrowdDensityEstimator',
    'estimate_densities',
    'SpecialEvent',
    'Weather',
    'parse_event',
    'parse_weather'
]
