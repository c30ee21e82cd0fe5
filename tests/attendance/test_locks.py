from __future__ import annotations

import threading

from src.attendance_ledger.attendance_ledger.attendance.locks import UserLockRegistry


def test_entries_are_dropped_after_release():
    registry = UserLockRegistry()

    with registry.hold("u1"):
        with registry.hold("u2"):
            assert registry.active_users() == 2

    assert registry.active_users() == 0


def test_same_user_is_mutually_exclusive():
    registry = UserLockRegistry()
    inside = 0
    max_inside = 0
    counter_lock = threading.Lock()

    def worker():
        nonlocal inside, max_inside
        for _ in range(200):
            with registry.hold("u1"):
                with counter_lock:
                    inside += 1
                    max_inside = max(max_inside, inside)
                with counter_lock:
                    inside -= 1

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert max_inside == 1
    assert registry.active_users() == 0


def test_waiter_keeps_entry_alive():
    registry = UserLockRegistry()
    acquired = threading.Event()

    def waiter():
        with registry.hold("u1"):
            acquired.set()

    with registry.hold("u1"):
        t = threading.Thread(target=waiter)
        t.start()
        assert not acquired.wait(timeout=0.05)

    assert acquired.wait(timeout=5)
    t.join(timeout=5)
    assert registry.active_users() == 0
