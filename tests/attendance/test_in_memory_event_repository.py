from __future__ import annotations

from src.attendance_ledger.attendance_ledger.attendance.in_memory_event_repository import InMemoryEventRepository
from src.attendance_ledger.attendance_ledger.attendance.model import AttendanceEvent
from src.attendance_ledger.attendance_ledger.core.enums import PresenceStatus


def _event(user_id, ts, status=PresenceStatus.IN):
    return AttendanceEvent(user_id=user_id, timestamp=ts, status=status)


def test_append_assigns_increasing_ids_and_sequences(at):
    repo = InMemoryEventRepository()

    a = repo.append(_event("u1", at(100)))
    b = repo.append(_event("u2", at(50)))

    assert a.event_id == a.sequence
    assert b.sequence > a.sequence


def test_range_is_ordered_by_timestamp_then_sequence(at):
    repo = InMemoryEventRepository()
    late = repo.append(_event("u1", at(300)))
    tie_first = repo.append(_event("u1", at(200), PresenceStatus.IN))
    early = repo.append(_event("u1", at(100)))
    tie_second = repo.append(_event("u1", at(200), PresenceStatus.OUT))

    assert list(repo.load_range("u1")) == [early, tie_first, tie_second, late]
    assert list(repo.load_range("u1", at(200), at(200))) == [tie_first, tie_second]


def test_load_latest_with_until(at):
    repo = InMemoryEventRepository()
    first = repo.append(_event("u1", at(100)))
    second = repo.append(_event("u1", at(200), PresenceStatus.OUT))
    tie = repo.append(_event("u1", at(200), PresenceStatus.IN))

    assert repo.load_latest("u1") == tie
    assert repo.load_latest("u1", until=at(199)) == first
    assert repo.load_latest("u1", until=at(200)) == tie
    assert repo.load_latest("u1", until=at(99)) is None
    assert repo.load_latest("ghost") is None
    assert second in repo.load_range("u1")


def test_range_returns_snapshot(at):
    repo = InMemoryEventRepository()
    repo.append(_event("u1", at(100)))

    snapshot = repo.load_range("u1")
    repo.append(_event("u1", at(200), PresenceStatus.OUT))

    assert len(snapshot) == 1
    assert repo.count() == 2
