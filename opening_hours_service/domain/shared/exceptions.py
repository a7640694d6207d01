"""
Domain Exceptions with Type Discrimination

Defines the exceptions raised while normalizing and validating opening hours.
Each exception carries an error type and a details mapping so that callers
can report failures without parsing messages.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    CONSTRAINT_VIOLATION = "constraint_violation"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class OpeningHoursError(DomainError):
    """Base class for every error raised by the opening hours domain."""


class ValidationError(OpeningHoursError):
    """Raised when a single opening hours field fails validation."""

    def __init__(
        self,
        field_name: str,
        value: object,
        message: str,
        error_code: str | None = None,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value
        self.error_code = error_code or "VALIDATION_ERROR"

        details = details or {}
        details.update(
            {
                "field": field_name,
                "value": str(value) if value is not None else None,
                "error_code": self.error_code,
            }
        )

        super().__init__(message, ErrorType.VALIDATION, details)

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "field": self.field_name,
            "value": str(self.value) if self.value is not None else None,
            "message": self.message,
            "error_code": self.error_code,
        }


class ConstraintViolationError(OpeningHoursError):
    """Raised when a set of intervals violates a schedule constraint."""

    def __init__(
        self,
        message: str,
        violations: list[str] | None = None,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        constraint_details = details or {}
        if violations:
            constraint_details["violations"] = str(violations)
        super().__init__(message, ErrorType.CONSTRAINT_VIOLATION, constraint_details)
        self.violations = violations or []


class InvalidWeekdayError(ValidationError):
    """Raised when a weekday token is not one of the seven weekday names."""

    def __init__(self, day_of_week: object) -> None:
        super().__init__(
            "dayOfWeek",
            day_of_week,
            f'Invalid dayOfWeek: "{day_of_week}"',
            "INVALID_WEEKDAY",
        )
        self.day_of_week = day_of_week


class InvalidTimeValueError(ValidationError):
    """Raised when a time string or a timezone name cannot be interpreted."""

    def __init__(self, field_name: str, value: object, reason: str) -> None:
        super().__init__(
            field_name,
            value,
            f"Invalid time value: {reason}",
            "INVALID_TIME_VALUE",
        )


class InvalidTimeRangeError(ValidationError):
    """Raised when an interval does not close strictly after it opens."""

    def __init__(
        self,
        day_of_week: str,
        opens: str,
        closes: str,
        message: str | None = None,
    ) -> None:
        super().__init__(
            "closes",
            closes,
            message
            or f"Invalid time range on {day_of_week}: opens at {opens} but closes at {closes}",
            "INVALID_TIME_RANGE",
            {"day_of_week": day_of_week, "opens": opens},
        )
        self.day_of_week = day_of_week
        self.opens = opens
        self.closes = closes


class OverlapError(ConstraintViolationError):
    """Raised when two intervals on the same weekday overlap."""

    def __init__(
        self,
        day_of_week: str,
        first: tuple[str, str],
        second: tuple[str, str],
    ) -> None:
        first_range = f"{first[0]}-{first[1]}"
        second_range = f"{second[0]}-{second[1]}"
        super().__init__(
            f"Invalid time ranges: {day_of_week} [{first_range}] overlaps with "
            f"{day_of_week} [{second_range}]",
            violations=[first_range, second_range],
            details={"day_of_week": day_of_week},
        )
        self.day_of_week = day_of_week
        self.first = first
        self.second = second
