"""Test helpers: record builders and a scripted schedule engine."""

from datetime import datetime

import pytz

REFERENCE_NOW = datetime(2024, 6, 10, 12, 0, tzinfo=pytz.utc)  # Monday


def hours_record(day_of_week, opens: str, closes: str) -> dict:
    """Build an OpeningHoursSpecification record."""
    return {
        "@type": "OpeningHoursSpecification",
        "dayOfWeek": day_of_week,
        "opens": opens,
        "closes": closes,
    }


class FakeScheduleEngine:
    """
    Scripted schedule engine.

    The state starts as `initially_open` and flips at every instant listed in
    `transitions`.
    """

    def __init__(
        self,
        schedule: str,
        timezone: str,
        transitions: list[datetime] | None = None,
        initially_open: bool = False,
    ):
        self.schedule = schedule
        self.timezone = timezone
        self.transitions = sorted(transitions or [])
        self.initially_open = initially_open

    def is_open_at(self, instant: datetime) -> bool:
        flips = sum(1 for t in self.transitions if t <= instant)
        return self.initially_open != (flips % 2 == 1)

    def next_change_after(self, instant: datetime) -> datetime | None:
        return next((t for t in self.transitions if t > instant), None)


class RecordingEngineFactory:
    """Engine factory that keeps every engine it builds."""

    def __init__(self):
        self.engines: list[FakeScheduleEngine] = []
        self.transitions: list[datetime] = []
        self.initially_open = False

    def __call__(self, schedule: str, timezone: str) -> FakeScheduleEngine:
        engine = FakeScheduleEngine(
            schedule, timezone, self.transitions, self.initially_open
        )
        self.engines.append(engine)
        return engine

    @property
    def schedules(self) -> list[str]:
        return [engine.schedule for engine in self.engines]
