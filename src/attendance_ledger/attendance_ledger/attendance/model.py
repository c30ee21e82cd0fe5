from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..core.enums import PresenceStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one IN/OUT presence event of a user.

    ``event_id`` and ``sequence`` are assigned by the event repository on
    append; an event that was never stored carries ``None`` in both.
    """

    user_id: str
    timestamp: datetime
    status: PresenceStatus
    event_id: Optional[int] = None
    sequence: Optional[int] = None

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return (self.timestamp, self.sequence if self.sequence is not None else -1)

    def stored(self, *, event_id: int, sequence: int) -> "AttendanceEvent":
        return replace(self, event_id=int(event_id), sequence=int(sequence))

    def as_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "sequence": self.sequence,
            "user_id": self.user_id,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
        }
