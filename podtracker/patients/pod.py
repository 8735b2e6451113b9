"""Post-operative day (POD) derivation.

POD is the signed number of whole calendar days between the operative date and
"today". Both sides are reduced to calendar dates in a single timezone before the
subtraction, so daylight-saving transitions never produce fractional days.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo


@lru_cache
def resolve_timezone(name: str) -> tzinfo:
    if name.strip().upper() == "UTC":
        return UTC
    return ZoneInfo(name)


def _to_day(value: date | datetime, tz: tzinfo | None) -> date:
    # datetime is a subclass of date, so check it first.
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def compute_pod(
    ot_date: date | datetime | None,
    now: date | datetime,
    *,
    tz: tzinfo | None = None,
) -> int:
    """Return ``today - ot_date`` in whole days (0 when the operative date is unknown)."""
    if ot_date is None:
        return 0
    return (_to_day(now, tz) - _to_day(ot_date, tz)).days


def utc_now() -> datetime:
    return datetime.now(UTC)


def current_pod(ot_date: date | datetime | None, *, timezone_name: str = "UTC") -> int:
    """POD as of now, with "today" taken in ``timezone_name``."""
    return compute_pod(ot_date, utc_now(), tz=resolve_timezone(timezone_name))
