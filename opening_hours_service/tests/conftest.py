"""
Shared fixtures for the opening hours test suite.

Conversions are anchored to the week of 10 June 2024, which contains no
daylight saving transition in any of the zones used by the tests.
"""

from collections.abc import Callable
from datetime import datetime

import pytest

from opening_hours_service.domain.schedule.services.normalizer import (
    ScheduleNormalizer,
)
from opening_hours_service.domain.schedule.services.opening_hours_service import (
    OpeningHoursService,
)
from opening_hours_service.tests.utils import REFERENCE_NOW, RecordingEngineFactory


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock frozen at REFERENCE_NOW."""
    return lambda: REFERENCE_NOW


@pytest.fixture
def normalizer() -> ScheduleNormalizer:
    return ScheduleNormalizer()


@pytest.fixture
def engine_factory() -> RecordingEngineFactory:
    return RecordingEngineFactory()


@pytest.fixture
def service(clock) -> OpeningHoursService:
    """UTC service backed by the real schedule engine."""
    return OpeningHoursService(timezone="UTC", clock=clock)


@pytest.fixture
def fake_service(clock, engine_factory) -> OpeningHoursService:
    """UTC service backed by the scripted engine."""
    return OpeningHoursService(
        timezone="UTC", clock=clock, engine_factory=engine_factory
    )
