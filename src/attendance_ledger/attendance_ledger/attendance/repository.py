from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent


class EventRepository(Protocol):
    """Storage contract consumed by the ledger.

    Ordering everywhere is ``(timestamp, sequence)`` ascending. ``append`` must
    be atomic: a later read sees the whole event or nothing of it. Failures to
    read or write are reported as ``StorageUnavailable``.
    """

    def load_latest(self, user_id: str, *, until: Optional[datetime] = None) -> Optional[AttendanceEvent]:
        """Latest event of the user, restricted to ``timestamp <= until`` when given."""

        raise NotImplementedError

    def load_range(
        self,
        user_id: str,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
    ) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        raise NotImplementedError
