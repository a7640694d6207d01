"""
Opening Hours Record Models

Pydantic models for the records exchanged with callers: the schema.org style
OpeningHoursSpecification, the per-day open range view and the next state
change. Fields stay as raw strings; the normalizer decides which domain error
a malformed value raises.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ...shared.exceptions import InvalidTimeValueError
from .opening_interval import SPECIFICATION_TYPE

OPEN_RANGE_PER_DAY_TYPE = "OpenRangePerDay"


class OpeningHoursSpecification(BaseModel):
    """Opening hours entry for one or several weekdays."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type_: str = Field(default=SPECIFICATION_TYPE, alias="@type")
    day_of_week: Any = Field(default=None, alias="dayOfWeek")
    opens: Any = None
    closes: Any = None

    @classmethod
    def coerce(
        cls, entry: "OpeningHoursSpecification | Mapping[str, Any]"
    ) -> "OpeningHoursSpecification":
        """
        Accept either a model instance or a plain record mapping.

        Raises:
            InvalidTimeValueError: If the entry is not a record or its fields
                cannot be read
        """
        if isinstance(entry, cls):
            return entry
        try:
            return cls.model_validate(dict(entry))
        except (TypeError, ValueError, PydanticValidationError) as e:
            raise InvalidTimeValueError(
                "record", entry, f"malformed opening hours record {entry!r}"
            ) from e

    def day_tokens(self) -> list[Any]:
        """Weekday tokens covered by this entry (one per listed day)."""
        if isinstance(self.day_of_week, list | tuple):
            return list(self.day_of_week)
        return [self.day_of_week]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class OpenRange(BaseModel):
    """Opening and closing time of one range within a day."""

    model_config = ConfigDict(frozen=True)

    open: str
    closes: str


class OpenRangePerDay(BaseModel):
    """All open ranges of a single weekday."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type_: str = Field(default=OPEN_RANGE_PER_DAY_TYPE, alias="@type")
    day_of_week: str = Field(alias="dayOfWeek")
    open_range: list[OpenRange] = Field(default_factory=list, alias="openRange")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class NextChange(BaseModel):
    """Next state transition reported by the schedule engine."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    state: Literal["open", "close"]
