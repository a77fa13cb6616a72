"""Partition occurrences into past / this week / upcoming relative to ``now``.

This is a pure partition of whatever list it is given. It does not decide
which occurrences belong in the list: the events page deliberately leaves
recurring instances out of its "past" input (see ``listing.build_event_listing``),
and that rule lives with the caller, not here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

from ..calendar.expander import ExpansionAnomaly
from ..calendar.models import EventOccurrence
from ..core.timezone_utils import DateLike, to_calendar_datetime

logger = logging.getLogger(__name__)

DEFAULT_WEEK_DAYS = 7


@dataclass
class ClassifiedOccurrences:
    """Occurrences bucketed for display, each bucket sorted by date."""

    now: datetime
    past: list[EventOccurrence] = field(default_factory=list)
    this_week: list[EventOccurrence] = field(default_factory=list)
    upcoming: list[EventOccurrence] = field(default_factory=list)
    anomalies: list[ExpansionAnomaly] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.past) + len(self.this_week) + len(self.upcoming)

    def counts(self) -> dict[str, int]:
        return {
            "past": len(self.past),
            "thisWeek": len(self.this_week),
            "upcoming": len(self.upcoming),
        }

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict for the listing renderer."""
        return {
            "now": self.now.isoformat(),
            "past": [occ.to_dict() for occ in self.past],
            "thisWeek": [occ.to_dict() for occ in self.this_week],
            "upcoming": [occ.to_dict() for occ in self.upcoming],
            "anomalies": [anomaly.to_dict() for anomaly in self.anomalies],
        }


def classify(
    occurrences: Iterable[EventOccurrence],
    now: DateLike,
    *,
    week_days: int = DEFAULT_WEEK_DAYS,
    timezone: Optional[str] = None,
) -> ClassifiedOccurrences:
    """Partition occurrences relative to ``now``.

    - past: ``occurrence_date < now``
    - this_week: ``now <= occurrence_date < now + week_days``
    - upcoming: ``occurrence_date >= now + week_days``

    Args:
        occurrences: Any list of occurrences (recurring and non-recurring)
        now: Reference instant; normalized with the same timezone policy as the expander
        week_days: Length of the "this week" bucket in days
        timezone: IANA timezone used to normalize ``now`` (defaults to the site zone)

    Returns:
        ClassifiedOccurrences; nothing is dropped
    """
    reference = to_calendar_datetime(now, timezone)
    week_end = reference + timedelta(days=week_days)

    result = ClassifiedOccurrences(now=reference)

    # sorted() is stable, so ties keep the caller's order
    for occurrence in sorted(occurrences, key=lambda occ: occ.occurrence_date):
        when = occurrence.occurrence_date
        if when < reference:
            result.past.append(occurrence)
        elif when < week_end:
            result.this_week.append(occurrence)
        else:
            result.upcoming.append(occurrence)

    logger.debug("Classified occurrences at %s: %s", reference, result.counts())
    return result
