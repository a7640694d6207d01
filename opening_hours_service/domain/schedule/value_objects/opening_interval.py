"""
Opening Interval Value Object

A single day-bounded opening range of the weekly schedule, held in minutes
since midnight. Validation of interval sets is the normalizer's job, so an
OpeningInterval can temporarily hold values that the integrity check will
reject.
"""

from __future__ import annotations

from dataclasses import dataclass

from .time_of_day import format_minutes
from .weekday import Weekday

SPECIFICATION_TYPE = "OpeningHoursSpecification"


@dataclass(frozen=True, order=True)
class OpeningInterval:
    """
    Opening range on one weekday.

    Ordering follows (weekday, opens, closes), which is the canonical order of
    the weekly schedule.
    """

    weekday: Weekday
    opens: int
    closes: int

    @property
    def opens_label(self) -> str:
        return format_minutes(self.opens)

    @property
    def closes_label(self) -> str:
        return format_minutes(self.closes)

    def duration_minutes(self) -> int:
        """
        Calculate the length of the interval in minutes.

        Returns:
            Duration in minutes
        """
        return self.closes - self.opens

    def to_specification(self) -> dict[str, str]:
        """Render the interval as an OpeningHoursSpecification record."""
        return {
            "@type": SPECIFICATION_TYPE,
            "dayOfWeek": self.weekday.label,
            "opens": self.opens_label,
            "closes": self.closes_label,
        }

    def __str__(self) -> str:
        return f"{self.weekday.label} {self.opens_label}-{self.closes_label}"
