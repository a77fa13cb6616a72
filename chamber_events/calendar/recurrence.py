"""Recurrence rules for chamber events.

A rule is one of three frozen variants. The pattern is always read off the
anchor ``date`` of the event, so there is no independent "which weekday"
field that could disagree with it:

- ``Weekly(weekday)``
- ``MonthlyDayOfMonth(day)``
- ``MonthlyDayOfWeek(week_index, weekday)``
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from ..core.timezone_utils import to_calendar_datetime
from ..exceptions import (
    InvalidSeriesBound,
    MissingMonthlyType,
    MissingRecurrenceType,
    RecurrenceValidationError,
)
from .models import Event, MonthlyType, RecurrenceType

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
ORDINALS = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th", 5: "5th"}

MAX_WEEK_INDEX = 5


@dataclass(frozen=True)
class Weekly:
    """Every 7 days on the anchor's weekday (0 = Monday)."""

    weekday: int

    def __post_init__(self) -> None:
        if not 0 <= self.weekday <= 6:
            raise ValueError(f"weekday must be 0-6, got {self.weekday}")

    def describe(self) -> str:
        return f"Weekly on {WEEKDAY_NAMES[self.weekday]}"


@dataclass(frozen=True)
class MonthlyDayOfMonth:
    """The anchor's day-of-month, clamped to the last day of shorter months."""

    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.day <= 31:
            raise ValueError(f"day must be 1-31, got {self.day}")

    def describe(self) -> str:
        return f"Monthly on day {self.day}"


@dataclass(frozen=True)
class MonthlyDayOfWeek:
    """The ``week_index``-th ``weekday`` of each month; months without one are skipped."""

    week_index: int
    weekday: int

    def __post_init__(self) -> None:
        if not 1 <= self.week_index <= MAX_WEEK_INDEX:
            raise ValueError(f"week_index must be 1-{MAX_WEEK_INDEX}, got {self.week_index}")
        if not 0 <= self.weekday <= 6:
            raise ValueError(f"weekday must be 0-6, got {self.weekday}")

    def describe(self) -> str:
        return f"Monthly on the {ORDINALS[self.week_index]} {WEEKDAY_NAMES[self.weekday]}"


RecurrenceRule = Union[Weekly, MonthlyDayOfMonth, MonthlyDayOfWeek]


def week_index_of(day_of_month: int) -> int:
    """Which occurrence of its weekday a day-of-month is (1-based, capped at 5)."""
    return min(math.ceil(day_of_month / 7), MAX_WEEK_INDEX)


def rule_from_anchor(
    recurrence_type: Optional[str],
    monthly_type: Optional[str],
    anchor: datetime,
    event_id: Optional[Any] = None,
) -> RecurrenceRule:
    """Build the rule variant for a recurrence type read off ``anchor``.

    Raises:
        MissingRecurrenceType: If ``recurrence_type`` is absent
        MissingMonthlyType: If a monthly rule has no ``monthly_type``
    """
    if not recurrence_type:
        raise MissingRecurrenceType(
            f"Event {event_id} is recurring but has no recurrence type", event_id
        )

    if recurrence_type == RecurrenceType.WEEKLY:
        return Weekly(weekday=anchor.weekday())

    if recurrence_type == RecurrenceType.MONTHLY:
        if monthly_type == MonthlyType.DAY_OF_MONTH:
            return MonthlyDayOfMonth(day=anchor.day)
        if monthly_type == MonthlyType.DAY_OF_WEEK:
            return MonthlyDayOfWeek(week_index=week_index_of(anchor.day), weekday=anchor.weekday())
        raise MissingMonthlyType(
            f"Event {event_id} repeats monthly but has no monthly type", event_id
        )

    raise MissingRecurrenceType(
        f"Event {event_id} has unsupported recurrence type {recurrence_type!r}", event_id
    )


def validate_recurrence(event: Event, tz_name: Optional[str] = None) -> Optional[RecurrenceRule]:
    """Validate an event's recurrence fields and return its rule.

    Checks run in order: recurrence type, monthly type, series bound. The
    series bound is compared by calendar date in the site timezone.

    Args:
        event: Event record
        tz_name: Timezone used to read calendar dates (defaults to the site zone)

    Returns:
        The rule variant, or None for a non-recurring event

    Raises:
        MissingRecurrenceType, MissingMonthlyType, InvalidSeriesBound
    """
    if not event.is_recurring:
        return None

    anchor = to_calendar_datetime(event.date, tz_name)
    rule = rule_from_anchor(event.recurrence_type, event.monthly_type, anchor, event.id)

    if event.end_date is None:
        raise InvalidSeriesBound(f"Recurring event {event.id} has no end date", event.id)

    series_end = to_calendar_datetime(event.end_date, tz_name)
    if series_end.date() < anchor.date():
        raise InvalidSeriesBound(
            f"Recurring event {event.id} ends ({series_end.date()}) "
            f"before it starts ({anchor.date()})",
            event.id,
        )

    return rule


def collect_validation_errors(
    events: Iterable[Event], tz_name: Optional[str] = None
) -> dict[Any, RecurrenceValidationError]:
    """Validate many events at once, e.g. before saving a CMS import.

    Returns:
        Mapping of event id to the validation error it raised
    """
    errors: dict[Any, RecurrenceValidationError] = {}
    for event in events:
        try:
            validate_recurrence(event, tz_name)
        except RecurrenceValidationError as e:
            errors[event.id] = e
    if errors:
        logger.debug("Recurrence validation failed for %d event(s)", len(errors))
    return errors
