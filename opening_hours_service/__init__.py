"""
Opening Hours Service

Timezone-aware weekly opening hours: normalization, storage and queries.
"""

from .domain.schedule.services.opening_hours_service import OpeningHoursService
from .domain.shared.exceptions import (
    InvalidTimeRangeError,
    InvalidTimeValueError,
    InvalidWeekdayError,
    OpeningHoursError,
    OverlapError,
)

__all__ = [
    "OpeningHoursService",
    "OpeningHoursError",
    "InvalidWeekdayError",
    "InvalidTimeValueError",
    "InvalidTimeRangeError",
    "OverlapError",
]
