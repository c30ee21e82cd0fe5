from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.attendance_ledger.attendance_ledger.attendance.in_memory_event_repository import InMemoryEventRepository
from src.attendance_ledger.attendance_ledger.attendance.ledger import AttendanceLedger

BASE = datetime(2026, 1, 1, 8, 0, 0, tzinfo=timezone.utc)


def _at(seconds: float) -> datetime:
    return BASE + timedelta(seconds=seconds)


@pytest.fixture
def at():
    """Instant ``seconds`` after a fixed base time, as a callable."""
    return _at


@pytest.fixture
def fixed_now() -> datetime:
    return _at(10_000)


@pytest.fixture
def events_repo() -> InMemoryEventRepository:
    return InMemoryEventRepository()


@pytest.fixture
def ledger(events_repo, fixed_now) -> AttendanceLedger:
    return AttendanceLedger(events_repo, clock=lambda: fixed_now)
