"""Occurrence expansion for chamber events.

Turns event records into concrete, ordered occurrences inside a caller
supplied window. The expander never reads the clock: ``window_start`` and
``window_end`` are the only notion of time it has, so identical inputs always
produce identical, identically ordered output.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from dateutil.relativedelta import relativedelta
from dateutil.rrule import FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, rrule
from pydantic import ValidationError

from ..core.config_manager import EngineConfig
from ..core.timezone_utils import DateLike, end_of_calendar_day, to_calendar_datetime
from ..exceptions import RecurrenceValidationError
from .models import Event, EventOccurrence
from .recurrence import (
    MonthlyDayOfMonth,
    MonthlyDayOfWeek,
    RecurrenceRule,
    Weekly,
    validate_recurrence,
)

logger = logging.getLogger(__name__)

EventInput = Union[Event, Mapping[str, Any]]

# Indexed by datetime.weekday(): 0 = Monday
RRULE_WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)


class AnomalyKind(str, Enum):
    """Why an event was skipped or truncated during expansion."""

    INVALID_RECORD = "invalid_record"
    INVALID_RECURRENCE = "invalid_recurrence"
    ITERATION_CAP = "iteration_cap"


@dataclass(frozen=True)
class ExpansionAnomaly:
    """A per-event data problem found during expansion."""

    event_id: Any
    kind: AnomalyKind
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "eventId": self.event_id,
            "kind": AnomalyKind(self.kind).value,
            "message": self.message,
        }


@dataclass
class ExpansionResult:
    """Occurrences plus the anomalies recorded while producing them."""

    occurrences: list[EventOccurrence] = field(default_factory=list)
    anomalies: list[ExpansionAnomaly] = field(default_factory=list)

    @property
    def has_anomalies(self) -> bool:
        return bool(self.anomalies)


def _record_anomaly(
    anomalies: list[ExpansionAnomaly], event_id: Any, kind: AnomalyKind, message: str
) -> None:
    logger.warning("Skipping event data anomaly (%s): %s", kind.value, message)
    anomalies.append(ExpansionAnomaly(event_id=event_id, kind=kind, message=message))


def coerce_event(record: EventInput, anomalies: list[ExpansionAnomaly]) -> Optional[Event]:
    """Return ``record`` as an Event, or None (recording an anomaly) if unreadable."""
    if isinstance(record, Event):
        return record

    try:
        return Event.model_validate(record)
    except ValidationError as e:
        event_id = record.get("id") if isinstance(record, Mapping) else None
        _record_anomaly(
            anomalies,
            event_id,
            AnomalyKind.INVALID_RECORD,
            f"Event {event_id} could not be read: {e.error_count()} validation error(s)",
        )
        return None


def load_events(records: Iterable[EventInput]) -> tuple[list[Event], list[ExpansionAnomaly]]:
    """Coerce raw CMS records into Event models, skipping unreadable ones.

    Returns:
        (events in input order, anomalies for the records that were skipped)
    """
    anomalies: list[ExpansionAnomaly] = []
    events = [e for e in (coerce_event(r, anomalies) for r in records) if e is not None]
    return events, anomalies


class OccurrenceExpander:
    """Expands event records into occurrences within a date window.

    Weekly and Nth-weekday rules are generated with ``dateutil.rrule``;
    day-of-month rules step with ``relativedelta`` from the anchor so that a
    31st clamps to the last day of shorter months without drifting later ones.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """Initialize expander.

        Args:
            config: Engine configuration (defaults to ``EngineConfig()``)
        """
        self.config = config or EngineConfig()

    def expand(
        self,
        events: Iterable[EventInput],
        window_start: DateLike,
        window_end: DateLike,
    ) -> list[EventOccurrence]:
        """Expand events into occurrences inside ``[window_start, window_end]``.

        Anomalies are logged; use ``expand_with_report`` to receive them.

        Returns:
            Occurrences sorted by date, ties in input order
        """
        return self.expand_with_report(events, window_start, window_end).occurrences

    def expand_with_report(
        self,
        events: Iterable[EventInput],
        window_start: DateLike,
        window_end: DateLike,
    ) -> ExpansionResult:
        """Expand events and report per-event anomalies.

        A bare ``date`` as ``window_end`` covers that whole calendar day.

        Args:
            events: Event models or raw CMS records, already eligibility filtered
            window_start: Inclusive window start
            window_end: Inclusive window end

        Returns:
            ExpansionResult with sorted occurrences and anomalies in input order

        Raises:
            ValueError: If the window ends before it starts
        """
        tz_name = self.config.timezone
        start = to_calendar_datetime(window_start, tz_name)
        end = to_calendar_datetime(window_end, tz_name, end_of_day=True)
        if end < start:
            raise ValueError(f"window_end ({end}) is before window_start ({start})")

        result = ExpansionResult()

        for record in events:
            event = coerce_event(record, result.anomalies)
            if event is None:
                continue

            if event.is_recurring:
                result.occurrences.extend(self._expand_series(event, start, end, result))
            else:
                occurrence = self._single_occurrence(event, start, end)
                if occurrence is not None:
                    result.occurrences.append(occurrence)

        # list.sort is stable: same-instant occurrences keep input event order
        result.occurrences.sort(key=lambda occ: occ.occurrence_date)

        logger.debug(
            "Expanded window %s..%s: %d occurrences, %d anomalies",
            start,
            end,
            len(result.occurrences),
            len(result.anomalies),
        )
        return result

    def _single_occurrence(
        self, event: Event, start: datetime, end: datetime
    ) -> Optional[EventOccurrence]:
        when = to_calendar_datetime(event.date, self.config.timezone)
        if start <= when <= end:
            return EventOccurrence(event=event, occurrence_date=when, is_recurring_instance=False)
        return None

    def _expand_series(
        self,
        event: Event,
        start: datetime,
        end: datetime,
        result: ExpansionResult,
    ) -> list[EventOccurrence]:
        tz_name = self.config.timezone

        try:
            rule = validate_recurrence(event, tz_name)
        except RecurrenceValidationError as e:
            _record_anomaly(result.anomalies, event.id, AnomalyKind.INVALID_RECURRENCE, str(e))
            return []

        if rule is None or event.end_date is None:
            return []

        anchor = to_calendar_datetime(event.date, tz_name)
        series_end = end_of_calendar_day(to_calendar_datetime(event.end_date, tz_name))

        lower = max(anchor, start)
        upper = min(series_end, end)
        if lower > upper:
            return []

        cap = self.config.max_iterations
        occurrences: list[EventOccurrence] = []

        for count, candidate in enumerate(self._candidates(rule, anchor, lower)):
            if candidate > upper:
                break
            if count >= cap:
                _record_anomaly(
                    result.anomalies,
                    event.id,
                    AnomalyKind.ITERATION_CAP,
                    f"Event {event.id} reached the {cap}-occurrence cap before {upper.date()}",
                )
                break
            occurrences.append(
                EventOccurrence(event=event, occurrence_date=candidate, is_recurring_instance=True)
            )

        logger.debug(
            "Event %s (%s): %d occurrences in %s..%s",
            event.id,
            rule.describe(),
            len(occurrences),
            lower.date(),
            upper.date(),
        )
        return occurrences

    def _candidates(
        self, rule: RecurrenceRule, anchor: datetime, lower: datetime
    ) -> Iterator[datetime]:
        """Yield ascending candidate dates of ``rule`` from ``lower`` onward (unbounded)."""
        if isinstance(rule, Weekly):
            return self._rrule_candidates(rrule(WEEKLY, dtstart=anchor), anchor, lower)

        if isinstance(rule, MonthlyDayOfWeek):
            nth_weekday = RRULE_WEEKDAYS[rule.weekday](+rule.week_index)
            series = rrule(MONTHLY, dtstart=anchor, byweekday=nth_weekday)
            return self._rrule_candidates(series, anchor, lower)

        if isinstance(rule, MonthlyDayOfMonth):
            return self._day_of_month_candidates(anchor, lower)

        raise TypeError(f"Unknown recurrence rule: {rule!r}")

    @staticmethod
    def _rrule_candidates(series: rrule, anchor: datetime, lower: datetime) -> Iterator[datetime]:
        # rrule drops sub-second precision from dtstart; put the anchor's back
        for candidate in series.xafter(lower.replace(microsecond=0), inc=True):
            candidate = candidate.replace(microsecond=anchor.microsecond)
            if candidate >= lower:
                yield candidate

    @staticmethod
    def _day_of_month_candidates(anchor: datetime, lower: datetime) -> Iterator[datetime]:
        # Offset every candidate from the anchor itself, never from the previous
        # candidate, so Jan 31 -> Feb 28 -> Mar 31.
        months = max(0, (lower.year - anchor.year) * 12 + lower.month - anchor.month)
        while True:
            candidate = anchor + relativedelta(months=months)
            if candidate >= lower:
                yield candidate
            months += 1


def expand_events(
    events: Iterable[EventInput],
    window_start: DateLike,
    window_end: DateLike,
    config: Optional[EngineConfig] = None,
) -> list[EventOccurrence]:
    """Expand events with a one-off expander (convenience function).

    Returns:
        Occurrences sorted by date, ties in input order
    """
    return OccurrenceExpander(config).expand(events, window_start, window_end)
