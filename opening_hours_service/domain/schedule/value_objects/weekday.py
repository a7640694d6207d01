"""
Weekday Value Object

ISO weekday numbering (Monday=1, Sunday=7) with the parsing rules used for
opening hours records and the two-letter codes of the schedule engine.
"""

from __future__ import annotations

from enum import IntEnum

from ...shared.exceptions import InvalidWeekdayError

_SHORT_CODES = {
    1: "Mo",
    2: "Tu",
    3: "We",
    4: "Th",
    5: "Fr",
    6: "Sa",
    7: "Su",
}


class Weekday(IntEnum):
    """Day of the week, ordered Monday first."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @property
    def label(self) -> str:
        """English name as used in opening hours records (e.g. "Monday")."""
        return self.name.capitalize()

    @property
    def short_code(self) -> str:
        """Two-letter code of the recurring schedule grammar (e.g. "Mo")."""
        return _SHORT_CODES[self.value]

    def shift(self, days: int) -> Weekday:
        """
        Move this weekday by a signed number of days, wrapping around the week.

        Args:
            days: Day offset, negative values move backwards

        Returns:
            The weekday reached after the offset
        """
        return Weekday((self.value - 1 + days) % 7 + 1)

    @classmethod
    def from_token(cls, token: object) -> Weekday:
        """
        Parse a weekday name or a schema.org style weekday URI.

        Args:
            token: "Monday" or "https://schema.org/Monday"

        Returns:
            Matching weekday

        Raises:
            InvalidWeekdayError: If the token names no weekday
        """
        if isinstance(token, Weekday):
            return token
        if not isinstance(token, str):
            raise InvalidWeekdayError(token)

        name = token.rstrip("/").rsplit("/", 1)[-1]
        for weekday in cls:
            if weekday.label == name:
                return weekday
        raise InvalidWeekdayError(token)

    @classmethod
    def labels(cls) -> list[str]:
        """All weekday names, Monday first."""
        return [weekday.label for weekday in cls]
