"""
Opening Hours Service

Owns the canonical weekly schedule of a business, expressed in one internal
timezone, and answers range, aggregate and point-in-time queries about it.

Every mutation runs the schedule normalizer over the complete new interval
set and swaps the canonical set only when normalization succeeds, then
recompiles the recurring schedule engine. Point-in-time and next-change
queries are delegated to that engine.

The service is not thread-safe; callers that share an instance across
threads must serialize access themselves.
"""

from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta

import pytz

from ....core.config import settings
from ....core.observability import get_logger
from ...shared.exceptions import OpeningHoursError
from ..value_objects.opening_interval import SPECIFICATION_TYPE, OpeningInterval
from ..value_objects.specification import NextChange, OpenRange, OpenRangePerDay
from ..value_objects.weekday import Weekday
from .normalizer import Candidate, ScheduleNormalizer
from .schedule_engine import (
    EngineFactory,
    OsmScheduleEngine,
    ScheduleEngine,
    compile_schedule_string,
)
from .timezone_converter import TimezoneConverter

logger = get_logger(__name__)

Clock = Callable[[], datetime]

# Upper bound on successive next-change lookups when searching for a state
_MAX_TRANSITION_STEPS = 4


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(pytz.utc)


class OpeningHoursService:
    """
    Weekly opening hours with timezone-aware storage and querying.

    Args:
        initial_hours: Optional records to seed the schedule with
        timezone: Internal zone of the canonical schedule, defaults to
            settings.DEFAULT_TIMEZONE
        input_timezone: Zone of initial_hours, defaults to the internal zone
        engine_factory: Builds the recurring schedule engine from the compiled
            schedule string and the internal zone
        clock: Returns the current instant; its date also selects the
            reference week for timezone conversions
        converter: Timezone adapter shared with the normalizer
        normalizer: Normalizer used for every mutation and export
    """

    def __init__(
        self,
        initial_hours: Iterable[Candidate] | None = None,
        timezone: str | None = None,
        input_timezone: str | None = None,
        *,
        engine_factory: EngineFactory = OsmScheduleEngine,
        clock: Clock = utc_now,
        converter: TimezoneConverter | None = None,
        normalizer: ScheduleNormalizer | None = None,
    ):
        self._converter = converter or TimezoneConverter()
        self._normalizer = normalizer or ScheduleNormalizer(self._converter)
        self._engine_factory = engine_factory
        self._clock = clock

        self._timezone = timezone or settings.DEFAULT_TIMEZONE
        self._converter.resolve(self._timezone)

        self._intervals: tuple[OpeningInterval, ...] = ()
        self._schedule_string, self._engine = self._rebuild_engine(
            self._intervals, self._timezone
        )

        initial = list(initial_hours or [])
        if initial:
            self.set_opening_hours(initial, input_timezone or self._timezone)

    # State

    @property
    def timezone(self) -> str:
        """Internal zone of the canonical schedule."""
        return self._timezone

    @property
    def intervals(self) -> tuple[OpeningInterval, ...]:
        """Canonical intervals in the internal zone."""
        return self._intervals

    @property
    def schedule_string(self) -> str:
        """Compact schedule string last compiled into the engine."""
        return self._schedule_string

    @property
    def engine(self) -> ScheduleEngine:
        """Recurring schedule engine compiled from the canonical intervals."""
        return self._engine

    # Mutations

    def set_opening_hours(
        self, hours: Iterable[Candidate], timezone: str | None = None
    ) -> None:
        """
        Replace the whole schedule.

        Args:
            hours: OpeningHoursSpecification records
            timezone: Zone of the records, defaults to the internal zone

        Raises:
            OpeningHoursError: If any record is invalid; the schedule is
                left unchanged
        """
        source_zone = timezone or self._timezone
        intervals = self._normalizer.normalize(
            list(hours), source_zone, self._timezone, self._reference_date()
        )
        self._replace(intervals)

        logger.info(
            "Opening hours replaced",
            interval_count=len(intervals),
            source_zone=source_zone,
            timezone=self._timezone,
        )

    def add_opening_hour(
        self,
        day_of_week: str,
        opens: str,
        closes: str,
        timezone: str | None = None,
    ) -> None:
        """
        Add a single opening range to the schedule.

        Args:
            day_of_week: Weekday name (e.g. "Monday")
            opens: Opening time "HH:mm"
            closes: Closing time "HH:mm" or "24:00"
            timezone: Zone of the times, defaults to the internal zone
        """
        self.add_opening_hours_batch(
            [
                {
                    "@type": SPECIFICATION_TYPE,
                    "dayOfWeek": day_of_week,
                    "opens": opens,
                    "closes": closes,
                }
            ],
            timezone,
        )

    def add_opening_hours_batch(
        self, hours: Iterable[Candidate], timezone: str | None = None
    ) -> None:
        """
        Add several opening ranges to the existing schedule.

        New ranges that overlap existing ones are rejected with OverlapError
        rather than replacing them.

        Args:
            hours: OpeningHoursSpecification records
            timezone: Zone of the records, defaults to the internal zone
        """
        source_zone = timezone or self._timezone
        added = self._normalizer.normalize(
            list(hours), source_zone, self._timezone, self._reference_date()
        )
        intervals = self._normalizer.combine_and_check_integrity(
            [*self._intervals, *added]
        )
        self._replace(intervals)

        logger.info(
            "Opening hours added",
            added_count=len(added),
            interval_count=len(intervals),
            source_zone=source_zone,
        )

    def remove_opening_hours_for_day(
        self, day_of_week: str, timezone: str | None = None
    ) -> None:
        """
        Remove every opening range of a weekday.

        The weekday is interpreted in the given zone: with a zone other than
        the internal one, the schedule is projected into that zone, the day is
        dropped there and the remainder is projected back.

        Args:
            day_of_week: Weekday name (e.g. "Monday")
            timezone: Zone in which day_of_week is meant
        """
        weekday = Weekday.from_token(day_of_week)
        zone = timezone or self._timezone
        reference_date = self._reference_date()

        if zone == self._timezone:
            remaining = [i for i in self._intervals if i.weekday != weekday]
            intervals = self._normalizer.combine_and_check_integrity(remaining)
        else:
            projected = self._normalizer.reproject(
                self._intervals, self._timezone, zone, reference_date
            )
            remaining = [i for i in projected if i.weekday != weekday]
            intervals = self._normalizer.reproject(
                remaining, zone, self._timezone, reference_date
            )
        self._replace(intervals)

        logger.info(
            "Opening hours removed for day",
            day_of_week=weekday.label,
            timezone=zone,
            interval_count=len(intervals),
        )

    def rebase(self, timezone: str) -> None:
        """
        Move the canonical schedule to a new internal zone.

        The opening hours keep their absolute meaning; only the zone in which
        they are stored and evaluated changes.
        """
        intervals = self._normalizer.reproject(
            self._intervals, self._timezone, timezone, self._reference_date()
        )
        previous = self._timezone
        self._replace(intervals, timezone)

        logger.info(
            "Opening hours rebased",
            previous_timezone=previous,
            timezone=timezone,
            interval_count=len(intervals),
        )

    def _replace(
        self, intervals: Iterable[OpeningInterval], timezone: str | None = None
    ) -> None:
        canonical = tuple(intervals)
        zone = timezone or self._timezone
        schedule, engine = self._rebuild_engine(canonical, zone)
        self._intervals = canonical
        self._timezone = zone
        self._schedule_string = schedule
        self._engine = engine

    def _rebuild_engine(
        self, intervals: Iterable[OpeningInterval], timezone: str
    ) -> tuple[str, ScheduleEngine]:
        schedule = compile_schedule_string(intervals)
        engine = self._engine_factory(schedule, timezone)
        logger.debug("Schedule engine rebuilt", schedule=schedule, timezone=timezone)
        return schedule, engine

    # Range and aggregate queries

    def export_opening_hours(self, timezone: str | None = None) -> list[dict[str, str]]:
        """
        Export the schedule as OpeningHoursSpecification records.

        Args:
            timezone: Zone of the exported records, defaults to the internal zone

        Returns:
            Merged, validated records sorted by weekday and opening time
        """
        return [
            interval.to_specification() for interval in self._project(timezone)
        ]

    def get_open_range_per_day(self, timezone: str | None = None) -> list[dict]:
        """
        Group the schedule by weekday.

        Returns:
            Seven OpenRangePerDay records, Monday first; days without hours
            have an empty openRange
        """
        buckets: dict[Weekday, list[OpenRange]] = {weekday: [] for weekday in Weekday}
        for interval in self._project(timezone):
            buckets[interval.weekday].append(
                OpenRange(open=interval.opens_label, closes=interval.closes_label)
            )

        return [
            OpenRangePerDay(day_of_week=weekday.label, open_range=ranges).to_dict()
            for weekday, ranges in buckets.items()
        ]

    def get_open_range_for_day(
        self, day_of_week: str, timezone: str | None = None
    ) -> dict:
        """Open ranges of a single weekday, empty when the day has no hours."""
        weekday = Weekday.from_token(day_of_week)
        for day in self.get_open_range_per_day(timezone):
            if day["dayOfWeek"] == weekday.label:
                return day
        return OpenRangePerDay(day_of_week=weekday.label).to_dict()

    def get_total_open_hours(self) -> float:
        """Total number of open hours in the week."""
        return sum(i.duration_minutes() for i in self._intervals) / 60

    def get_days_without_opening_hours(self) -> list[str]:
        """Names of the weekdays that have no opening hours, Monday first."""
        open_days = {interval.weekday for interval in self._intervals}
        return [weekday.label for weekday in Weekday if weekday not in open_days]

    def validate_opening_hours(self, hours: Iterable[Candidate] | None = None) -> bool:
        """
        Check records (or the current schedule) without raising.

        Args:
            hours: Records to check, defaults to the current schedule

        Returns:
            True if the records are well formed and free of overlaps
        """
        candidates = (
            [interval.to_specification() for interval in self._intervals]
            if hours is None
            else list(hours)
        )
        try:
            self._normalizer.validate(candidates)
        except OpeningHoursError as e:
            logger.debug(
                "Opening hours rejected by validation",
                error_type=type(e).__name__,
                error=e.message,
            )
            return False
        return True

    def _project(self, timezone: str | None) -> list[OpeningInterval]:
        zone = timezone or self._timezone
        return self._normalizer.reproject(
            self._intervals, self._timezone, zone, self._reference_date()
        )

    def _reference_date(self) -> date:
        return self._converter.to_zone(self._clock(), self._timezone).date()

    # Point-in-time queries

    def is_open_at(self, at: datetime) -> bool:
        """Whether the business is open at an instant (naive = internal zone)."""
        return self._engine.is_open_at(self._instant(at))

    def is_closed_at(self, at: datetime) -> bool:
        return not self.is_open_at(at)

    def is_open_now(self) -> bool:
        return self.is_open_at(self._clock())

    def is_closed_now(self) -> bool:
        return not self.is_open_now()

    def is_always_open(self) -> bool:
        """Open now and never changing state."""
        return self.is_open_now() and self.get_next_change() is None

    def is_always_closed(self) -> bool:
        """Closed now and never changing state."""
        return self.is_closed_now() and self.get_next_change() is None

    def get_next_change(self, at: datetime | None = None) -> NextChange | None:
        """
        Next state transition after an instant.

        Args:
            at: Reference instant, defaults to now

        Returns:
            NextChange with the state entered at the transition, or None when
            the schedule never changes
        """
        instant = self._instant(at)
        change = self._engine.next_change_after(instant)
        if change is None:
            return None

        state = "close" if self._engine.is_open_at(instant) else "open"
        return NextChange(date=self._converter.to_zone(change, self._timezone), state=state)

    def get_next_opening_time(self, at: datetime | None = None) -> datetime | None:
        """Instant of the next transition into the open state."""
        return self._next_transition_to("open", at)

    def get_next_closing_time(self, at: datetime | None = None) -> datetime | None:
        """Instant of the next transition into the closed state."""
        return self._next_transition_to("close", at)

    def _next_transition_to(self, state: str, at: datetime | None) -> datetime | None:
        change = self.get_next_change(at)
        for _ in range(_MAX_TRANSITION_STEPS):
            if change is None or change.state == state:
                break
            change = self.get_next_change(change.date)

        if change is None or change.state != state:
            return None
        return change.date

    def open_minutes_window(self, at: datetime | None = None) -> int:
        """
        Minutes the business stays open from an instant.

        Returns:
            0 when closed, MAX_WINDOW_MINUTES when no change is coming,
            otherwise whole minutes until closing
        """
        instant = self._instant(at)
        if self.is_closed_at(instant):
            return 0
        return self._minutes_until_change(instant)

    def close_minutes_window(self, at: datetime | None = None) -> int:
        """
        Minutes the business stays closed from an instant.

        Returns:
            0 when open, MAX_WINDOW_MINUTES when no change is coming,
            otherwise whole minutes until opening
        """
        instant = self._instant(at)
        if self.is_open_at(instant):
            return 0
        return self._minutes_until_change(instant)

    def is_open_for_duration(self, duration_minutes: int, at: datetime | None = None) -> bool:
        """Whether the business stays open for the whole duration."""
        return self.open_minutes_window(at) >= duration_minutes

    def is_closed_for_duration(
        self, duration_minutes: int, at: datetime | None = None
    ) -> bool:
        """Whether the business stays closed for the whole duration."""
        return self.close_minutes_window(at) >= duration_minutes

    def _minutes_until_change(self, instant: datetime) -> int:
        change = self.get_next_change(instant)
        if change is None:
            return settings.MAX_WINDOW_MINUTES
        return int((change.date - instant) // timedelta(minutes=1))

    def _instant(self, at: datetime | None) -> datetime:
        if at is None:
            at = self._clock()
        return self._converter.to_zone(at, self._timezone)

    def __repr__(self) -> str:
        return (
            f"OpeningHoursService(timezone={self._timezone!r}, "
            f"intervals={len(self._intervals)})"
        )
