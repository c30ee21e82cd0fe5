from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from ..core.exceptions import InvalidInput


def now_utc() -> datetime:
    """Current time, timezone-aware UTC.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: datetime) -> datetime:
    """Aware UTC -> naive UTC, the form stored in MySQL DATETIME columns."""
    return as_utc(value).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str], field_name: str = "timestamp") -> Optional[datetime]:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into aware UTC."""
    v = (value or "").strip()
    if not v:
        return None
    if v.endswith(("Z", "z")):
        v = v[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(v))
    except ValueError:
        raise InvalidInput(f"{field_name} is not a valid ISO-8601 datetime: {value!r}")
