"""Timestamp helpers shared by the scanner and the event correlator."""

from __future__ import annotations

from contextlib import suppress
from datetime import datetime, timezone
from typing import Any

from kubescope.constants.values import AGE_UNKNOWN

_SECONDS_PER_MINUTE = 60
_SECONDS_PER_HOUR = 60 * 60
_SECONDS_PER_DAY = 24 * 60 * 60


def parse_iso_timestamp(timestamp: Any) -> datetime | None:
    """Parse kubernetes timestamp strings into aware datetimes."""
    if isinstance(timestamp, datetime):
        return timestamp if timestamp.tzinfo else timestamp.replace(tzinfo=timezone.utc)
    if not isinstance(timestamp, str) or not timestamp:
        return None
    with suppress(ValueError, TypeError):
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_age(creation_timestamp: Any, now: datetime | None = None) -> str:
    """Render elapsed time since ``creation_timestamp`` as one whole unit.

    Examples: 2 days -> "2d", 90 minutes -> "1h", 30 minutes -> "30m".
    Absent or unparseable timestamps render as "Unknown". Timestamps in the
    future render as "0m".
    """
    created = parse_iso_timestamp(creation_timestamp)
    if created is None:
        return AGE_UNKNOWN

    elapsed = max(0, int(((now or utc_now()) - created).total_seconds()))
    days = elapsed // _SECONDS_PER_DAY
    if days > 0:
        return f"{days}d"
    hours = elapsed // _SECONDS_PER_HOUR
    if hours > 0:
        return f"{hours}h"
    return f"{elapsed // _SECONDS_PER_MINUTE}m"


def age_seconds(creation_timestamp: Any, now: datetime | None = None) -> float | None:
    """Return seconds since ``creation_timestamp`` or None when unknown."""
    created = parse_iso_timestamp(creation_timestamp)
    if created is None:
        return None
    return ((now or utc_now()) - created).total_seconds()
