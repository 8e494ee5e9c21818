from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional

from ..core.constants import DEFAULT_NON_ATTENDANCE_WEEKDAYS


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def is_non_attendance_day(day: date, weekdays: Iterable[int] = DEFAULT_NON_ATTENDANCE_WEEKDAYS) -> bool:
    return day.weekday() in set(weekdays)


def coerce_timestamp(value: Any) -> Optional[datetime]:
    """Normalize a stored timestamp field to an aware UTC datetime.

    The store may hand back a datetime, epoch seconds or an ISO-8601 string.
    Values without an offset are taken as UTC. Empty values mean the
    timestamp is not set.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
