from __future__ import annotations

import bisect
import itertools
import threading
from datetime import datetime
from typing import Optional, Sequence

from .model import AttendanceEvent
from .repository import EventRepository


class _UserTimeline:
    """Events of one user kept sorted by ``(timestamp, sequence)``."""

    def __init__(self):
        self.keys: list[tuple[datetime, int]] = []
        self.events: list[AttendanceEvent] = []

    def insert(self, event: AttendanceEvent) -> None:
        key = event.sort_key
        idx = bisect.bisect_right(self.keys, key)
        self.keys.insert(idx, key)
        self.events.insert(idx, event)


class InMemoryEventRepository(EventRepository):
    """Process-local event store.

    Note: Reads return snapshot lists, so callers may iterate them while other
    threads keep appending.
    """

    def __init__(self):
        self._timelines: dict[str, _UserTimeline] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def load_latest(self, user_id: str, *, until: Optional[datetime] = None) -> Optional[AttendanceEvent]:
        with self._lock:
            timeline = self._timelines.get(user_id)
            if not timeline or not timeline.events:
                return None
            if until is None:
                return timeline.events[-1]
            # Every stored key with timestamp == until sorts before (until, +inf).
            idx = bisect.bisect_right(timeline.keys, (until, float("inf")))
            return timeline.events[idx - 1] if idx else None

    def load_range(
        self,
        user_id: str,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
    ) -> Sequence[AttendanceEvent]:
        with self._lock:
            timeline = self._timelines.get(user_id)
            if not timeline:
                return []
            lo = 0 if from_time is None else bisect.bisect_left(timeline.keys, (from_time, float("-inf")))
            hi = len(timeline.keys) if to_time is None else bisect.bisect_right(timeline.keys, (to_time, float("inf")))
            return list(timeline.events[lo:hi])

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        with self._lock:
            new_id = next(self._ids)
            stored = event.stored(event_id=new_id, sequence=new_id)
            self._timelines.setdefault(stored.user_id, _UserTimeline()).insert(stored)
            return stored

    def count(self) -> int:
        with self._lock:
            return sum(len(t.events) for t in self._timelines.values())
