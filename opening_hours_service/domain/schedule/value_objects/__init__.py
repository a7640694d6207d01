"""Value objects for the weekly schedule domain."""

from .opening_interval import SPECIFICATION_TYPE, OpeningInterval
from .specification import (
    OPEN_RANGE_PER_DAY_TYPE,
    NextChange,
    OpeningHoursSpecification,
    OpenRange,
    OpenRangePerDay,
)
from .time_of_day import (
    END_OF_DAY,
    MINUTES_PER_DAY,
    START_OF_DAY,
    format_minutes,
    parse_time,
)
from .weekday import Weekday

__all__ = [
    # Intervals
    "OpeningInterval",
    "SPECIFICATION_TYPE",
    # Records
    "NextChange",
    "OpeningHoursSpecification",
    "OpenRange",
    "OpenRangePerDay",
    "OPEN_RANGE_PER_DAY_TYPE",
    # Times and days
    "END_OF_DAY",
    "MINUTES_PER_DAY",
    "START_OF_DAY",
    "format_minutes",
    "parse_time",
    "Weekday",
]
