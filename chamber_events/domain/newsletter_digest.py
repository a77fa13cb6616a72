"""Upcoming-events digest for the chamber newsletter.

The newsletter lists the next few published occurrences starting from the
moment it is sent. Recurring events contribute their individual instances,
so a weekly coffee hour can fill more than one slot.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ..calendar.expander import EventInput, ExpansionAnomaly, OccurrenceExpander, load_events
from ..calendar.models import EventOccurrence
from ..core.config_manager import EngineConfig
from ..core.timezone_utils import DateLike, to_calendar_datetime
from .eligibility import filter_eligible

logger = logging.getLogger(__name__)

# Newsletter defaults
DEFAULT_DIGEST_DAYS = 45
DEFAULT_DIGEST_LIMIT = 5


class NewsletterDigest(BaseModel):
    """Occurrences selected for one newsletter send."""

    window_start: datetime = Field(..., alias="windowStart")
    window_end: datetime = Field(..., alias="windowEnd")
    occurrences: list[EventOccurrence] = Field(default_factory=list)
    total_count: int = Field(..., alias="totalCount", description="Occurrences before truncation")
    anomalies: list[ExpansionAnomaly] = Field(
        default_factory=list, description="Records skipped or truncated while expanding"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def truncated(self) -> bool:
        """True if more occurrences fell in the window than were kept."""
        return self.total_count > len(self.occurrences)

    @field_serializer("window_start", "window_end")
    def serialize_window(self, dt: datetime) -> str:
        return dt.isoformat()

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, mode="json", exclude={"anomalies"})
        data["truncated"] = self.truncated
        data["anomalies"] = [anomaly.to_dict() for anomaly in self.anomalies]
        return data


def build_newsletter_digest(
    events: Iterable[EventInput],
    now: DateLike,
    *,
    days: Optional[int] = None,
    limit: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> NewsletterDigest:
    """Select the next ``limit`` published occurrences in ``[now, now + days]``.

    Args:
        events: Event models or raw CMS records (any status)
        now: Send time
        days: Look-ahead in days (defaults to ``config.digest_days``, 45)
        limit: Maximum occurrences kept (defaults to ``config.digest_limit``, 5)
        config: Engine configuration (defaults to ``EngineConfig()``)

    Returns:
        NewsletterDigest with occurrences sorted by date

    Raises:
        ValueError: If ``days`` is negative or ``limit`` is not positive
    """
    config = config or EngineConfig()
    days = config.digest_days if days is None else days
    limit = config.digest_limit if limit is None else limit

    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    window_start = to_calendar_datetime(now, config.timezone)
    window_end = window_start + timedelta(days=days)

    loaded, anomalies = load_events(events)
    expanded = OccurrenceExpander(config).expand_with_report(
        filter_eligible(loaded), window_start, window_end
    )

    digest = NewsletterDigest(
        window_start=window_start,
        window_end=window_end,
        occurrences=expanded.occurrences[:limit],
        total_count=len(expanded.occurrences),
        anomalies=anomalies + expanded.anomalies,
    )

    logger.info(
        "Newsletter digest %s..%s: %d of %d occurrences",
        window_start.date(),
        window_end.date(),
        len(digest.occurrences),
        digest.total_count,
    )
    return digest
