"""Wall-clock helpers: local-time normalization and tracker timestamp format.

Task due dates and time-entry dates are kept as naive datetimes expressing
local wall-clock time. "Local" is the zone named by ``TIMEZONE`` when set,
otherwise the system zone.
"""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo

import pytz

from .config import TIMEZONE


def configured_timezone(name: str | None = None) -> tzinfo | None:
    zone = name if name is not None else TIMEZONE
    if not zone:
        return None
    return pytz.timezone(zone)


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_local_naive(value: datetime, tz: tzinfo | None = None) -> datetime:
    """Express ``value`` as naive local wall-clock time (seconds precision)."""
    tz = tz if tz is not None else configured_timezone()
    if value.tzinfo is not None:
        value = value.astimezone(tz) if tz is not None else value.astimezone()
        value = value.replace(tzinfo=None)
    return value.replace(microsecond=0)


def local_now(tz: tzinfo | None = None) -> datetime:
    return to_local_naive(utc_now(), tz)


def localize(value: datetime, tz: tzinfo | None = None) -> datetime:
    """Attach the local zone to a naive wall-clock datetime."""
    if value.tzinfo is not None:
        return value
    tz = tz if tz is not None else configured_timezone()
    if tz is None:
        return value.astimezone()
    if isinstance(tz, pytz.BaseTzInfo):
        return tz.localize(value)
    return value.replace(tzinfo=tz)


def format_jira_timestamp(value: datetime, tz: tzinfo | None = None) -> str:
    """Format as ``2024-01-10T09:00:00.000+0000`` (the worklog ``started`` format)."""
    aware = localize(value, tz)
    millis = aware.microsecond // 1000
    return aware.strftime("%Y-%m-%dT%H:%M:%S") + f".{millis:03d}" + aware.strftime("%z")
