"""Events page listing: past, this week and upcoming occurrences."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import timedelta
from typing import Optional

from ..calendar.expander import EventInput, OccurrenceExpander, load_events
from ..core.config_manager import EngineConfig
from ..core.timezone_utils import DateLike, to_calendar_datetime
from .eligibility import filter_eligible
from .window_classifier import ClassifiedOccurrences, classify

logger = logging.getLogger(__name__)


def build_event_listing(
    events: Iterable[EventInput],
    now: DateLike,
    *,
    config: Optional[EngineConfig] = None,
) -> ClassifiedOccurrences:
    """Build the classified occurrence listing shown on the events page.

    Upcoming occurrences cover ``[now, now + listing_days]`` for every
    published event. The past bucket is fed only from non-recurring events
    in ``[now - past_days, now)``; past instances of a recurring series are
    never listed.

    Args:
        events: Event models or raw CMS records (any status)
        now: Reference instant
        config: Engine configuration (defaults to ``EngineConfig()``)

    Returns:
        ClassifiedOccurrences with the anomalies from loading and expansion
    """
    config = config or EngineConfig()
    reference = to_calendar_datetime(now, config.timezone)

    loaded, anomalies = load_events(events)
    eligible = filter_eligible(loaded)

    expander = OccurrenceExpander(config)

    ahead = expander.expand_with_report(
        eligible, reference, reference + timedelta(days=config.listing_days)
    )

    one_off = [event for event in eligible if not event.is_recurring]
    behind = expander.expand_with_report(
        one_off, reference - timedelta(days=config.past_days), reference
    )
    # The past window is half-open; ``ahead`` already holds anything at ``now``
    past = [occ for occ in behind.occurrences if occ.occurrence_date < reference]

    listing = classify(
        past + ahead.occurrences,
        reference,
        week_days=config.week_days,
        timezone=config.timezone,
    )
    listing.anomalies = anomalies + ahead.anomalies + behind.anomalies

    logger.info(
        "Built event listing from %d published events: %s",
        len(eligible),
        listing.counts(),
    )
    return listing
