from __future__ import annotations

import threading
import time

from src.attendance_ledger.attendance_ledger.attendance.ledger import AttendanceLedger
from src.attendance_ledger.attendance_ledger.core.enums import PresenceStatus
from src.attendance_ledger.attendance_ledger.core.exceptions import InvalidTransition


class SlowRepository:
    """Widens the window between reading the latest event and appending."""

    def __init__(self, inner, delay: float = 0.005):
        self._inner = inner
        self._delay = delay

    def load_latest(self, user_id, *, until=None):
        latest = self._inner.load_latest(user_id, until=until)
        time.sleep(self._delay)
        return latest

    def load_range(self, user_id, from_time=None, to_time=None):
        return self._inner.load_range(user_id, from_time, to_time)

    def append(self, event):
        return self._inner.append(event)


def _run_threads(n, target):
    barrier = threading.Barrier(n)
    results: list[object] = []
    lock = threading.Lock()

    def worker(i):
        barrier.wait()
        try:
            outcome = target(i)
        except Exception as e:
            outcome = e
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    return results


def test_concurrent_first_ins_for_one_user_accept_exactly_one(events_repo, fixed_now, at):
    ledger = AttendanceLedger(SlowRepository(events_repo), clock=lambda: fixed_now)

    results = _run_threads(16, lambda i: ledger.record_event("u1", PresenceStatus.IN, at(100)))

    accepted = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, Exception)]
    assert len(accepted) == 1
    assert len(rejected) == 15
    assert all(isinstance(r, InvalidTransition) for r in rejected)
    assert len(events_repo.load_range("u1")) == 1


def test_concurrent_mixed_events_keep_alternation(events_repo, fixed_now, at):
    ledger = AttendanceLedger(SlowRepository(events_repo), clock=lambda: fixed_now)

    def target(i):
        status = PresenceStatus.IN if i % 2 == 0 else PresenceStatus.OUT
        return ledger.record_event("u1", status, at(100 + i // 4))

    _run_threads(24, target)

    statuses = [e.status for e in ledger.history("u1")]
    assert statuses[0] == PresenceStatus.IN
    assert all(prev != cur for prev, cur in zip(statuses, statuses[1:]))


def test_concurrent_different_users_all_accepted(events_repo, fixed_now, at):
    ledger = AttendanceLedger(SlowRepository(events_repo), clock=lambda: fixed_now)

    results = _run_threads(12, lambda i: ledger.record_event(f"user-{i}", PresenceStatus.IN, at(100)))

    assert not [r for r in results if isinstance(r, Exception)]
    assert events_repo.count() == 12


def test_held_user_lock_does_not_block_other_users(events_repo, fixed_now, at):
    ledger = AttendanceLedger(events_repo, clock=lambda: fixed_now)
    done = threading.Event()

    def record_for_bob():
        ledger.record_event("bob", PresenceStatus.IN, at(100))
        done.set()

    with ledger._locks.hold("alice"):
        t = threading.Thread(target=record_for_bob)
        t.start()
        assert done.wait(timeout=5)
        t.join(timeout=5)
