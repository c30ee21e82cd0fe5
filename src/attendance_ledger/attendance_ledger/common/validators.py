from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from ..core.constants import MAX_EVENT_TIME, MAX_USER_ID_LENGTH, MIN_EVENT_TIME
from ..core.enums import PresenceStatus
from ..core.exceptions import InvalidInput
from .datetime_utils import as_utc


def require_user_id(value: str) -> str:
    """Reject blank or over-long ids; the id itself is returned untouched."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput("user_id must be a non-empty string")
    if len(value) > MAX_USER_ID_LENGTH:
        raise InvalidInput(f"user_id must be at most {MAX_USER_ID_LENGTH} characters")
    return value


def require_status(value: Union[PresenceStatus, str]) -> PresenceStatus:
    if isinstance(value, PresenceStatus):
        return value
    if isinstance(value, str):
        try:
            return PresenceStatus(value.strip().upper())
        except ValueError:
            pass
    raise InvalidInput(f"status must be one of IN, OUT (got {value!r})")


def optional_datetime(value: Optional[datetime], field_name: str) -> Optional[datetime]:
    if value is None:
        return None
    if not isinstance(value, datetime):
        raise InvalidInput(f"{field_name} must be a datetime")
    try:
        return as_utc(value)
    except OverflowError:
        raise InvalidInput(f"{field_name} is out of range: {value!r}")


def require_storable_time(value: datetime, field_name: str = "timestamp") -> datetime:
    if not MIN_EVENT_TIME <= value <= MAX_EVENT_TIME:
        raise InvalidInput(
            f"{field_name} must be between {MIN_EVENT_TIME.isoformat()} and {MAX_EVENT_TIME.isoformat()}"
        )
    return value
