"""
Domain Services

Normalization, timezone conversion and query services for the weekly
opening hours schedule.
"""

from .normalizer import ScheduleNormalizer
from .opening_hours_service import OpeningHoursService, utc_now
from .schedule_engine import (
    EngineFactory,
    OsmScheduleEngine,
    ScheduleEngine,
    compile_schedule_string,
)
from .timezone_converter import TimezoneConverter

__all__ = [
    "EngineFactory",
    "OpeningHoursService",
    "OsmScheduleEngine",
    "ScheduleEngine",
    "ScheduleNormalizer",
    "TimezoneConverter",
    "compile_schedule_string",
    "utc_now",
]
