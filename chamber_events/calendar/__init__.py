"""Event models, recurrence rules and occurrence expansion."""

from .expander import (
    AnomalyKind,
    ExpansionAnomaly,
    ExpansionResult,
    OccurrenceExpander,
    coerce_event,
    expand_events,
    load_events,
)
from .models import Event, EventOccurrence, EventStatus, MonthlyType, RecurrenceSettings, RecurrenceType
from .recurrence import (
    MonthlyDayOfMonth,
    MonthlyDayOfWeek,
    RecurrenceRule,
    Weekly,
    collect_validation_errors,
    rule_from_anchor,
    validate_recurrence,
)

__all__ = [
    "AnomalyKind",
    "Event",
    "EventOccurrence",
    "EventStatus",
    "ExpansionAnomaly",
    "ExpansionResult",
    "MonthlyDayOfMonth",
    "MonthlyDayOfWeek",
    "MonthlyType",
    "OccurrenceExpander",
    "RecurrenceRule",
    "RecurrenceSettings",
    "RecurrenceType",
    "Weekly",
    "coerce_event",
    "collect_validation_errors",
    "expand_events",
    "load_events",
    "rule_from_anchor",
    "validate_recurrence",
]
