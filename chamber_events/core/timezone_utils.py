"""Timezone policy and calendar-datetime normalization for chamber_events.

Every datetime that enters the engine is reduced to a naive wall-clock
datetime in the site timezone. Recurrence arithmetic then runs on calendar
components only, so a 10:00 AM series stays at 10:00 AM across DST changes.
"""

from __future__ import annotations

import datetime
import logging
import os
import zoneinfo
from typing import Union

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# The chamber is in Vermont
DEFAULT_SITE_TIMEZONE = "America/New_York"

TIMEZONE_ENV_VAR = "CHAMBER_EVENTS_TIMEZONE"
TEST_TIME_ENV_VAR = "CHAMBER_EVENTS_TEST_TIME"

DateLike = Union[datetime.datetime, datetime.date, str]


def get_site_timezone(fallback: str = DEFAULT_SITE_TIMEZONE) -> str:
    """Get the site timezone from the environment with validation.

    Args:
        fallback: Timezone used when the variable is unset or invalid

    Returns:
        Valid IANA timezone string
    """
    timezone = os.environ.get(TIMEZONE_ENV_VAR) or fallback

    try:
        zoneinfo.ZoneInfo(timezone)
        return timezone
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning("Invalid timezone %r, falling back to %r", timezone, fallback)
        return fallback


def resolve_timezone(tz_name: str | None) -> zoneinfo.ZoneInfo:
    """Resolve a timezone name to a ZoneInfo, falling back to the site default.

    Args:
        tz_name: IANA timezone identifier, or None for the configured site zone

    Returns:
        ZoneInfo instance
    """
    if not tz_name:
        return zoneinfo.ZoneInfo(get_site_timezone())

    try:
        return zoneinfo.ZoneInfo(tz_name)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning("Invalid timezone %r, falling back to %r", tz_name, DEFAULT_SITE_TIMEZONE)
        return zoneinfo.ZoneInfo(DEFAULT_SITE_TIMEZONE)


def parse_datetime(value: str) -> datetime.datetime:
    """Parse an ISO-8601 string (date-only or full instant).

    Raises:
        ValueError: If the string is not ISO-8601
    """
    return date_parser.isoparse(value.strip())


def to_calendar_datetime(
    value: DateLike,
    tz_name: str | None = None,
    *,
    end_of_day: bool = False,
) -> datetime.datetime:
    """Reduce a date-like value to a naive local wall-clock datetime.

    - aware datetimes are converted into the site zone, then tzinfo is dropped
    - naive datetimes are assumed to already be local and returned unchanged
    - bare dates become local midnight, or 23:59:59.999999 with ``end_of_day``
    - strings are parsed as ISO-8601 first; a date-only string is a bare date

    Args:
        value: datetime, date, or ISO string
        tz_name: IANA timezone (defaults to the site timezone)
        end_of_day: Interpret a bare date as the end of that day

    Returns:
        Naive datetime in local wall-clock time
    """
    if isinstance(value, str):
        text = value.strip()
        # YYYY-MM-DD
        if len(text) == 10:
            value = datetime.date.fromisoformat(text)
        else:
            value = parse_datetime(text)

    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value
        return value.astimezone(resolve_timezone(tz_name)).replace(tzinfo=None)

    if isinstance(value, datetime.date):
        at = datetime.time.max if end_of_day else datetime.time.min
        return datetime.datetime.combine(value, at)

    raise TypeError(f"Expected datetime, date or ISO string, got {type(value).__name__}")


def end_of_calendar_day(value: datetime.datetime) -> datetime.datetime:
    """Return the last representable instant of ``value``'s calendar day."""
    return datetime.datetime.combine(value.date(), datetime.time.max)


def now_local(tz_name: str | None = None) -> datetime.datetime:
    """Return the current local wall-clock time as a naive datetime.

    Only callers at the edge of the system (the CLI) use this; the engine
    takes ``now`` as a parameter. Can be overridden for testing via the
    CHAMBER_EVENTS_TEST_TIME environment variable (ISO 8601).
    """
    test_time = os.environ.get(TEST_TIME_ENV_VAR)
    if test_time:
        try:
            return to_calendar_datetime(parse_datetime(test_time), tz_name)
        except ValueError as e:
            logger.warning("Failed to parse %s=%r: %s", TEST_TIME_ENV_VAR, test_time, e)

    return datetime.datetime.now(resolve_timezone(tz_name)).replace(tzinfo=None)
