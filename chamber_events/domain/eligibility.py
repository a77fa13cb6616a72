"""Eligibility gate: which event records may be expanded and shown at all."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..calendar.models import Event, EventStatus

logger = logging.getLogger(__name__)


def is_eligible(event: Event) -> bool:
    """True iff the event is published.

    Pending, draft and cancelled events never produce occurrences.
    """
    return event.event_status == EventStatus.PUBLISHED


def filter_eligible(events: Iterable[Event]) -> list[Event]:
    """Keep eligible events, preserving input order."""
    candidates = list(events)
    eligible = [event for event in candidates if is_eligible(event)]

    dropped = len(candidates) - len(eligible)
    if dropped:
        logger.debug("Eligibility gate dropped %d of %d events", dropped, len(candidates))

    return eligible
