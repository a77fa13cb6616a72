"""Exception hierarchy for the chamber_events occurrence engine.

Validation errors are raised while an event is being authored. The expander
itself never lets them escape: it turns them into anomalies so that one bad
record cannot blank an entire listing or newsletter.
"""

from __future__ import annotations

from typing import Any, Optional


class ChamberEventsError(Exception):
    """Base exception for all chamber_events errors."""


class RecurrenceValidationError(ChamberEventsError):
    """A recurring event record does not describe a usable series.

    Raised by ``validate_recurrence`` when:
    - the recurrence type is missing
    - a monthly rule does not say how to pick the day
    - the series end bound is missing or before the anchor date

    Attributes:
        event_id: Identifier of the offending event, when known
    """

    def __init__(self, message: str, event_id: Optional[Any] = None):
        super().__init__(message)
        self.event_id = event_id


class MissingRecurrenceType(RecurrenceValidationError):
    """``isRecurring`` is set but ``recurrence.recurrenceType`` is absent."""


class MissingMonthlyType(RecurrenceValidationError):
    """``recurrenceType`` is monthly but ``monthlyType`` is absent."""


class InvalidSeriesBound(RecurrenceValidationError):
    """The series ``endDate`` is missing or falls before the anchor date."""


class EventInputError(ChamberEventsError):
    """Event input could not be read or decoded (CLI input files)."""


class ConfigurationError(ChamberEventsError):
    """An explicitly supplied configuration value is unusable."""
