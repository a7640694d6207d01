"""
Timezone Converter

Thin pytz adapter that projects weekday wall-clock times onto absolute
instants and back. Unknown IANA zone names surface as InvalidTimeValueError.
"""

from datetime import date, datetime, time, timedelta

import pytz

from ...shared.exceptions import InvalidTimeValueError
from ..value_objects.weekday import Weekday


class TimezoneConverter:
    """Converts between wall-clock times in IANA zones and UTC instants."""

    def resolve(self, zone: str) -> pytz.BaseTzInfo:
        """
        Look up an IANA timezone.

        Args:
            zone: IANA zone name (e.g. "America/New_York")

        Returns:
            pytz timezone

        Raises:
            InvalidTimeValueError: If the zone name is unknown
        """
        if not isinstance(zone, str) or not zone:
            raise InvalidTimeValueError("timezone", zone, f"unknown timezone {zone!r}")
        try:
            return pytz.timezone(zone)
        except pytz.UnknownTimeZoneError as e:
            raise InvalidTimeValueError(
                "timezone", zone, f"unknown timezone {zone!r}"
            ) from e

    @staticmethod
    def anchor_date(weekday: Weekday, reference_date: date) -> date:
        """Calendar date of a weekday within the Monday-first week of reference_date."""
        week_start = reference_date - timedelta(days=reference_date.weekday())
        return week_start + timedelta(days=weekday.value - 1)

    def wall_clock_to_instant(self, day: date, minutes: int, zone: str) -> datetime:
        """
        Interpret a wall-clock time on a calendar date in a zone.

        Args:
            day: Local calendar date
            minutes: Minutes since local midnight
            zone: IANA zone name

        Returns:
            Aware UTC instant
        """
        tz = self.resolve(zone)
        local = datetime.combine(day, time()) + timedelta(minutes=minutes)
        return tz.localize(local).astimezone(pytz.utc)

    def instant_to_wall_clock(self, instant: datetime, zone: str) -> tuple[date, int]:
        """
        Read the local calendar date and wall-clock minutes of an instant.

        Args:
            instant: Aware instant
            zone: IANA zone name

        Returns:
            (local date, minutes since local midnight)
        """
        local = self.to_zone(instant, zone)
        return local.date(), local.hour * 60 + local.minute

    def to_zone(self, instant: datetime, zone: str) -> datetime:
        """Express an instant in a zone; naive values are taken as local to that zone."""
        tz = self.resolve(zone)
        if instant.tzinfo is None:
            return tz.localize(instant)
        return instant.astimezone(tz)

    def format_instant(
        self, instant: datetime, pattern: str = "%H:%M", zone: str | None = None
    ) -> str:
        """Format an instant, optionally after projecting it into a zone."""
        if zone is not None:
            instant = self.to_zone(instant, zone)
        return instant.strftime(pattern)
