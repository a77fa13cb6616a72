"""Shared fixtures for chamber_events tests."""

import os
from collections.abc import Iterator
from datetime import datetime
from typing import Any

import pytest

from chamber_events.calendar.models import Event
from chamber_events.core.config_manager import EngineConfig

# Environment variables read by the engine; cleared around every test
ENGINE_ENV_VARS = [
    "CHAMBER_EVENTS_TIMEZONE",
    "CHAMBER_EVENTS_MAX_ITERATIONS",
    "CHAMBER_EVENTS_LISTING_DAYS",
    "CHAMBER_EVENTS_PAST_DAYS",
    "CHAMBER_EVENTS_DIGEST_DAYS",
    "CHAMBER_EVENTS_DIGEST_LIMIT",
    "CHAMBER_EVENTS_LOG_LEVEL",
    "CHAMBER_EVENTS_DEBUG",
    "CHAMBER_EVENTS_TEST_TIME",
]


def pytest_configure(config: Any) -> None:
    """Register test markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "critical_path: Core functionality tests")
    config.addinivalue_line("markers", "smoke: Basic smoke tests")


@pytest.fixture(autouse=True)
def isolated_engine_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test with no CHAMBER_EVENTS_* variables set."""
    for key in ENGINE_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def engine_config() -> EngineConfig:
    """Default engine configuration pinned to the site timezone."""
    return EngineConfig(timezone="America/New_York")


def make_event(
    event_id: Any,
    date: datetime,
    *,
    end_date: Any = None,
    recurring: bool = False,
    recurrence_type: Any = None,
    monthly_type: Any = None,
    status: str = "published",
    title: Any = None,
) -> Event:
    """Build an Event the way the CMS would send it."""
    record: dict[str, Any] = {
        "id": event_id,
        "title": title or f"Event {event_id}",
        "date": date,
        "endDate": end_date,
        "isRecurring": recurring,
        "eventStatus": status,
    }
    if recurring:
        record["recurrence"] = {"recurrenceType": recurrence_type, "monthlyType": monthly_type}
    return Event.model_validate(record)


@pytest.fixture
def event_factory() -> Any:
    """Factory for CMS-shaped Event models."""
    return make_event


@pytest.fixture
def weekly_coffee(event_factory: Any) -> Event:
    """Weekly Monday 10:00 series through March 2024."""
    return event_factory(
        "coffee",
        datetime(2024, 1, 1, 10, 0),
        end_date=datetime(2024, 3, 31),
        recurring=True,
        recurrence_type="weekly",
        title="Business After Hours Coffee",
    )
