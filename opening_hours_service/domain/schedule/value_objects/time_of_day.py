"""Wall-clock times of day as minutes since midnight."""

import re

from ...shared.exceptions import InvalidTimeValueError

MINUTES_PER_DAY = 24 * 60
START_OF_DAY = "00:00"
END_OF_DAY = "24:00"

_TIME_PATTERN = re.compile(r"^(?P<hours>\d{2}):(?P<minutes>\d{2})$")


def parse_time(value: object, field_name: str = "time") -> int:
    """
    Convert an "HH:mm" string into minutes since midnight.

    "24:00" is accepted as the end of the day and maps to 1440.

    Args:
        value: Time string to parse
        field_name: Field reported in the error when parsing fails

    Returns:
        Minutes since midnight in the range 0..1440

    Raises:
        InvalidTimeValueError: If the value is not a valid "HH:mm" time
    """
    if not isinstance(value, str):
        raise InvalidTimeValueError(field_name, value, f"expected HH:mm, got {value!r}")

    match = _TIME_PATTERN.match(value)
    if match is None:
        raise InvalidTimeValueError(field_name, value, f"expected HH:mm, got {value!r}")

    hours = int(match.group("hours"))
    minutes = int(match.group("minutes"))
    if hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    if hours > 23 or minutes > 59:
        raise InvalidTimeValueError(
            field_name, value, f"{value!r} is outside 00:00-24:00"
        )
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as "HH:mm" (1440 becomes "24:00")."""
    if minutes == MINUTES_PER_DAY:
        return END_OF_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
