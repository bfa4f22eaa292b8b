"""
Time, ritual-calendar and weather modifiers for crowd density estimation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from ..config.estimator_config import EstimatorConfig


class Weather(Enum):
    """Observed weather, overriding the hour-of-day temperature proxy."""
    HOT = "hot"
    RAIN = "rain"
    PLEASANT = "pleasant"
    NORMAL = "normal"


class SpecialEvent(Enum):
    """Event signals that override the calendar rules."""
    MAIN_RITUAL_DAY = "main_ritual_day"
    ORDINARY_DAY = "ordinary_day"
    STONING_RITUAL = "stoning_ritual"


def parse_weather(value: Union[str, Weather, None]) -> Optional[Weather]:
    """Accept a Weather, its string value, or None."""
    if value is None or isinstance(value, Weather):
        return value
    try:
        return Weather(value.lower() if isinstance(value, str) else value)
    except ValueError:
        available = [w.value for w in Weather]
        raise ValueError(f"Unknown weather '{value}'. Available: {available}")


def parse_event(value: Union[str, SpecialEvent, None]) -> Optional[SpecialEvent]:
    """Accept a SpecialEvent, its string value, or None."""
    if value is None or isinstance(value, SpecialEvent):
        return value
    try:
        return SpecialEvent(value.lower() if isinstance(value, str) else value)
    except ValueError:
        available = [e.value for e in SpecialEvent]
        raise ValueError(f"Unknown event '{value}'. Available: {available}")


def time_modifier(hour: int, config: EstimatorConfig) -> float:
    """
    Generic hour-of-day multiplier.

    Regimes are checked in order and the first match wins, so hour 5 is early
    morning rather than prayer time and hour 19 is after-prayer.
    """
    modifiers = config.time_modifiers
    if hour >= 22 or hour < 4:
        return modifiers['night']
    if 4 <= hour < 6:
        return modifiers['early_morning']
    if hour in config.prayer_hours:
        return modifiers['during_prayer']
    if hour in config.after_prayer_hours:
        return modifiers['after_prayer']
    if hour in config.before_prayer_hours:
        return modifiers['before_prayer']
    return 1.0


def is_main_ritual_day(now: datetime, config: EstimatorConfig,
                       event: Optional[SpecialEvent] = None) -> bool:
    """
    Whether `now` falls on the main ritual day.

    An explicit event signal wins. Without one, the calendar stand-in applies:
    the configured weekday, or any minute divisible by the configured modulus.
    """
    if event is SpecialEvent.MAIN_RITUAL_DAY:
        return True
    if event is SpecialEvent.ORDINARY_DAY:
        return False

    if now.weekday() == config.ritual_weekday:
        return True
    modulus = config.ritual_minute_modulus
    return modulus is not None and now.minute % modulus == 0


def is_stoning_window(hour: int, config: EstimatorConfig,
                      event: Optional[SpecialEvent] = None) -> bool:
    return event is SpecialEvent.STONING_RITUAL or hour in config.jamarat_hours


def location_time_modifier(location_name: str, hour: int, generic_modifier: float,
                           ritual_day: bool, stoning_window: bool,
                           config: EstimatorConfig) -> float:
    """Replace the generic modifier with a site's peak-ritual multiplier when one applies."""
    modifiers = config.time_modifiers
    if location_name == 'Jamaraat Bridge' and stoning_window:
        return modifiers['jamarat']
    if location_name == 'Masjid al-Haram' and hour in config.tawaf_hours:
        return modifiers['tawaf']
    if location_name == 'Arafat' and ritual_day:
        return modifiers['hajj_day']
    return generic_modifier


def weather_modifier(hour: int, config: EstimatorConfig,
                     weather: Optional[Weather] = None) -> float:
    """
    Weather multiplier.

    Real weather input wins; otherwise hour of day stands in for temperature
    (hot midday thins crowds, mild late afternoon draws them out).
    """
    modifiers = config.weather_modifiers
    if weather is not None:
        return modifiers[weather.value]
    if 11 <= hour <= 15:
        return modifiers['hot']
    if 16 <= hour <= 18:
        return modifiers['pleasant']
    return 1.0


def current_total_pilgrims(now: datetime, config: EstimatorConfig) -> int:
    """Interpolate the on-site population across the configured range by minute of the hour."""
    span = config.total_pilgrims_max - config.total_pilgrims_min
    return config.total_pilgrims_min + int((now.minute / 60) * span)


def base_occupancy(location_name: str, now: datetime,
                   ritual_day: bool, stoning_window: bool) -> float:
    """Site-specific occupancy curve before modifiers are applied."""
    hour = now.hour
    if location_name == 'Masjid al-Haram':
        # always busy, cycling with the hour
        return 0.7 + (hour % 3) * 0.1
    if location_name == 'Jamaraat Bridge':
        return 0.9 if stoning_window else 0.5
    if location_name == 'Mina':
        return 0.95 if ritual_day else 0.6
    if location_name == 'Arafat':
        # near-empty outside the main ritual day
        return 0.98 if ritual_day else 0.3
    if location_name == 'Muzdalifah':
        return 0.85 if 18 <= hour <= 23 else 0.4
    return 0.4 + (now.minute % 10) / 10
