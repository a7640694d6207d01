"""
Schedule Normalizer

Turns opening hours entries expressed in one timezone into a canonical,
day-bounded interval list expressed in another timezone. The pipeline is:

    expand -> validate shape -> convert endpoints -> split at midnight
    -> sort -> merge adjacent -> integrity check

Every step fails fast: a normalization either returns a complete, valid
interval list or raises, never a partial result.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from ....core.config import settings
from ....core.observability import get_logger
from ...shared.exceptions import InvalidTimeRangeError, OverlapError
from ..value_objects.opening_interval import OpeningInterval
from ..value_objects.specification import OpeningHoursSpecification
from ..value_objects.time_of_day import MINUTES_PER_DAY, format_minutes, parse_time
from ..value_objects.weekday import Weekday
from .timezone_converter import TimezoneConverter

logger = get_logger(__name__)

Candidate = OpeningHoursSpecification | Mapping[str, Any]


class ScheduleNormalizer:
    """
    Validates, converts and canonicalizes opening hours intervals.

    The normalizer is stateless apart from its collaborators, so one instance
    can serve any number of schedules.
    """

    def __init__(
        self,
        converter: TimezoneConverter | None = None,
        adjacency_tolerance: int | None = None,
    ):
        self._converter = converter or TimezoneConverter()
        self._adjacency_tolerance = (
            settings.ADJACENCY_TOLERANCE_MINUTES
            if adjacency_tolerance is None
            else adjacency_tolerance
        )

    @property
    def converter(self) -> TimezoneConverter:
        return self._converter

    # Pipeline entry points

    def normalize(
        self,
        candidates: Iterable[Candidate],
        source_zone: str,
        dest_zone: str,
        reference_date: date,
    ) -> list[OpeningInterval]:
        """
        Run the full pipeline on raw opening hours records.

        Args:
            candidates: OpeningHoursSpecification models or record mappings
            source_zone: IANA zone the records are expressed in
            dest_zone: IANA zone of the result
            reference_date: Any date of the week used to anchor weekdays

        Returns:
            Sorted, merged and validated intervals in dest_zone

        Raises:
            InvalidWeekdayError: Unknown weekday token
            InvalidTimeValueError: Malformed time or unknown zone
            InvalidTimeRangeError: Interval that does not close after it opens
            OverlapError: Overlapping intervals on the same weekday
        """
        self._converter.resolve(source_zone)
        self._converter.resolve(dest_zone)

        intervals = self.parse(candidates)
        converted = self._convert_all(intervals, source_zone, dest_zone, reference_date)
        result = self.combine_and_check_integrity(converted)

        logger.debug(
            "Normalized opening hours",
            candidate_count=len(intervals),
            interval_count=len(result),
            source_zone=source_zone,
            dest_zone=dest_zone,
        )
        return result

    def reproject(
        self,
        intervals: Iterable[OpeningInterval],
        source_zone: str,
        dest_zone: str,
        reference_date: date,
    ) -> list[OpeningInterval]:
        """
        Move already-validated intervals from one zone to another.

        Runs conversion, split, sort, merge and integrity check; the shape
        validation of raw records is skipped.
        """
        self._converter.resolve(source_zone)
        self._converter.resolve(dest_zone)

        converted = self._convert_all(
            list(intervals), source_zone, dest_zone, reference_date
        )
        return self.combine_and_check_integrity(converted)

    def validate(self, candidates: Iterable[Candidate]) -> list[OpeningInterval]:
        """
        Check raw records for shape errors and overlaps without converting.

        Returns:
            The parsed intervals in canonical order
        """
        intervals = self.sort(self.parse(candidates))
        self.check_integrity(intervals)
        return intervals

    def combine_and_check_integrity(
        self, intervals: Iterable[OpeningInterval]
    ) -> list[OpeningInterval]:
        """Sort, merge adjacent ranges and verify the result."""
        combined = self.merge_adjacent(self.sort(intervals))
        self.check_integrity(combined)
        return combined

    # Step 1 and 2: expand and validate shape

    def expand(self, candidates: Iterable[Candidate]) -> list[OpeningHoursSpecification]:
        """
        Split entries covering several weekdays into one entry per weekday.

        Args:
            candidates: Records whose dayOfWeek is a name, a URI or a list

        Returns:
            Records with a single weekday token each
        """
        expanded: list[OpeningHoursSpecification] = []
        for candidate in candidates:
            spec = OpeningHoursSpecification.coerce(candidate)
            for token in spec.day_tokens():
                expanded.append(spec.model_copy(update={"day_of_week": token}))
        return expanded

    def parse(self, candidates: Iterable[Candidate]) -> list[OpeningInterval]:
        """Expand records and validate each one into an interval."""
        return [self._parse_entry(spec) for spec in self.expand(candidates)]

    def _parse_entry(self, spec: OpeningHoursSpecification) -> OpeningInterval:
        weekday = Weekday.from_token(spec.day_of_week)
        opens = parse_time(spec.opens, "opens")
        closes = parse_time(spec.closes, "closes")

        if closes <= opens:
            raise InvalidTimeRangeError(weekday.label, spec.opens, spec.closes)

        return OpeningInterval(weekday, opens, closes)

    # Steps 3 to 5: convert endpoints, re-anchor weekdays, split

    def _convert_all(
        self,
        intervals: list[OpeningInterval],
        source_zone: str,
        dest_zone: str,
        reference_date: date,
    ) -> list[OpeningInterval]:
        if source_zone == dest_zone:
            return list(intervals)

        converted: list[OpeningInterval] = []
        for interval in intervals:
            converted.extend(
                self.convert_interval(interval, source_zone, dest_zone, reference_date)
            )
        return converted

    def convert_interval(
        self,
        interval: OpeningInterval,
        source_zone: str,
        dest_zone: str,
        reference_date: date,
    ) -> list[OpeningInterval]:
        """
        Convert one interval between zones, splitting it at local midnight.

        Args:
            interval: Interval expressed in source_zone
            source_zone: IANA zone of the interval
            dest_zone: IANA zone of the result
            reference_date: Any date of the week used to anchor weekdays

        Returns:
            Zero, one or two day-bounded intervals in dest_zone
        """
        opens_day, opens = self._convert_endpoint(
            interval.weekday, interval.opens, source_zone, dest_zone, reference_date
        )
        closes_day, closes = self._convert_endpoint(
            interval.weekday, interval.closes, source_zone, dest_zone, reference_date
        )

        if opens_day == closes_day:
            return [OpeningInterval(opens_day, opens, closes)]

        pieces: list[OpeningInterval] = []
        if opens != MINUTES_PER_DAY:
            pieces.append(OpeningInterval(opens_day, opens, MINUTES_PER_DAY))
        if closes != 0:
            pieces.append(OpeningInterval(closes_day, 0, closes))
        return pieces

    def _convert_endpoint(
        self,
        weekday: Weekday,
        minutes: int,
        source_zone: str,
        dest_zone: str,
        reference_date: date,
    ) -> tuple[Weekday, int]:
        anchor = self._converter.anchor_date(weekday, reference_date)

        # 24:00 is midnight of the anchor day moved one day forward
        day_shift = 0
        if minutes == MINUTES_PER_DAY:
            minutes, day_shift = 0, 1

        instant = self._converter.wall_clock_to_instant(anchor, minutes, source_zone)
        local_day, local_minutes = self._converter.instant_to_wall_clock(
            instant, dest_zone
        )
        offset = (local_day - anchor).days + day_shift
        return weekday.shift(offset), local_minutes

    # Steps 6 to 8: sort, merge, integrity

    @staticmethod
    def sort(intervals: Iterable[OpeningInterval]) -> list[OpeningInterval]:
        """Order intervals by weekday (Monday first), then by opening time."""
        return sorted(intervals, key=lambda i: (i.weekday, i.opens))

    def merge_adjacent(self, intervals: list[OpeningInterval]) -> list[OpeningInterval]:
        """
        Merge consecutive same-day intervals separated by at most the tolerance.

        Args:
            intervals: Intervals sorted by weekday and opening time

        Returns:
            Intervals with adjacent ranges coalesced
        """
        merged: list[OpeningInterval] = []
        for interval in intervals:
            if merged and self._are_adjacent(merged[-1], interval):
                previous = merged[-1]
                merged[-1] = OpeningInterval(
                    previous.weekday,
                    previous.opens,
                    max(previous.closes, interval.closes),
                )
            else:
                merged.append(interval)
        return merged

    def _are_adjacent(self, first: OpeningInterval, second: OpeningInterval) -> bool:
        if first.weekday != second.weekday:
            return False
        gap = second.opens - first.closes
        return 0 <= gap <= self._adjacency_tolerance

    @staticmethod
    def check_integrity(intervals: list[OpeningInterval]) -> None:
        """
        Verify that every interval is well formed and that none overlap.

        Args:
            intervals: Intervals sorted by weekday and opening time

        Raises:
            InvalidTimeRangeError: Malformed interval
            OverlapError: Two same-day intervals overlap
        """
        for index, current in enumerate(intervals):
            day = current.weekday.label
            opens_label = format_minutes(current.opens)
            closes_label = format_minutes(current.closes)

            if current.opens == MINUTES_PER_DAY:
                raise InvalidTimeRangeError(
                    day,
                    opens_label,
                    closes_label,
                    f"Invalid opening time on {day}: opens at {opens_label}",
                )
            if current.closes <= current.opens:
                raise InvalidTimeRangeError(day, opens_label, closes_label)
            if current.closes > MINUTES_PER_DAY:
                raise InvalidTimeRangeError(
                    day,
                    opens_label,
                    closes_label,
                    f"Invalid closing time on {day}: closes at {closes_label}",
                )

            if index + 1 < len(intervals):
                following = intervals[index + 1]
                if (
                    following.weekday == current.weekday
                    and current.closes > following.opens
                ):
                    raise OverlapError(
                        day,
                        (opens_label, closes_label),
                        (following.opens_label, following.closes_label),
                    )
