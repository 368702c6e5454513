"""Timestamp helpers shared by the storage and service layers.

All timestamps are timezone-aware UTC. They are stored as fixed-width ISO-8601
strings so that SQLite can compare them lexicographically.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_utc(value).isoformat(timespec="microseconds")


def from_db(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return ensure_utc(datetime.fromisoformat(value))


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a client supplied ISO-8601 timestamp (``Z`` suffix allowed)."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Serialize for JSON responses."""
    return ensure_utc(value).isoformat() if value is not None else None


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def whole_minutes(delta: timedelta) -> int:
    """Truncate a duration to whole minutes (toward zero)."""
    return int(delta.total_seconds() / 60)
