"""
Recurring Schedule Engine

Compiles the canonical weekly intervals into the compact OpenStreetMap
opening_hours grammar and wraps the `opening_hours` evaluator behind the
ScheduleEngine protocol. The facade only depends on the protocol, so any
engine built by an injected factory can stand in for the real one.
"""

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Protocol

from opening_hours import OpeningHours

from ..value_objects.opening_interval import OpeningInterval
from ..value_objects.time_of_day import END_OF_DAY, START_OF_DAY
from ..value_objects.weekday import Weekday
from .timezone_converter import TimezoneConverter

CLOSED_MARKER = "off"
CLAUSE_SEPARATOR = "; "


class ScheduleEngine(Protocol):
    """Point-in-time and next-transition queries over a weekly schedule."""

    def is_open_at(self, instant: datetime) -> bool: ...

    def next_change_after(self, instant: datetime) -> datetime | None: ...


EngineFactory = Callable[[str, str], ScheduleEngine]


def compile_schedule_string(intervals: Iterable[OpeningInterval]) -> str:
    """
    Build the compact weekly schedule string.

    One clause per weekday, Monday first: the two-letter code followed by
    comma-separated ranges, or "off" for a day without hours.

    Args:
        intervals: Canonical intervals sorted by weekday and opening time

    Returns:
        Schedule string such as "Mo 09:00-12:00,14:00-18:00; Tu off; ..."
    """
    ranges: dict[Weekday, list[str]] = {weekday: [] for weekday in Weekday}
    for interval in intervals:
        ranges[interval.weekday].append(
            f"{interval.opens_label}-{interval.closes_label}"
        )

    clauses = [
        f"{weekday.short_code} {','.join(day_ranges) if day_ranges else CLOSED_MARKER}"
        for weekday, day_ranges in ranges.items()
    ]
    return CLAUSE_SEPARATOR.join(clauses)


class OsmScheduleEngine:
    """
    ScheduleEngine backed by the `opening_hours` package.

    The evaluator works on naive wall-clock datetimes, so instants are moved
    into the schedule's zone before each query and results are localized back.
    """

    def __init__(
        self,
        schedule: str,
        timezone: str,
        converter: TimezoneConverter | None = None,
    ):
        self._schedule = schedule
        self._timezone = timezone
        self._converter = converter or TimezoneConverter()
        self._evaluator = OpeningHours(schedule)

        clauses = schedule.split(CLAUSE_SEPARATOR)
        self._always_closed = all(c.endswith(f" {CLOSED_MARKER}") for c in clauses)
        self._always_open = all(
            c.endswith(f" {START_OF_DAY}-{END_OF_DAY}") for c in clauses
        )

    @property
    def schedule(self) -> str:
        return self._schedule

    def is_open_at(self, instant: datetime) -> bool:
        return bool(self._evaluator.is_open(self._wall_clock(instant)))

    def next_change_after(self, instant: datetime) -> datetime | None:
        # A schedule that never changes has no transition to search for
        if self._always_closed or self._always_open:
            return None

        change = self._evaluator.next_change(self._wall_clock(instant))
        if change is None:
            return None
        return self._converter.to_zone(change, self._timezone)

    def _wall_clock(self, instant: datetime) -> datetime:
        return self._converter.to_zone(instant, self._timezone).replace(tzinfo=None)

    def __repr__(self) -> str:
        return f"OsmScheduleEngine(schedule={self._schedule!r}, timezone={self._timezone!r})"
