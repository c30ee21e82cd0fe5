from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import as_utc, to_naive_utc
from ..core.enums import PresenceStatus
from ..core.exceptions import StorageUnavailable
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent
from .repository import EventRepository

_LOGGER = logging.getLogger(__name__)

_COLUMNS = "event_id, user_id, event_time, status"

# Connection-level failures only; data and integrity errors propagate unchanged.
_TRANSIENT_ERRORS = (mysql.connector.errors.InterfaceError, mysql.connector.errors.OperationalError)


def _to_event(r: dict) -> AttendanceEvent:
    event_id = int(r["event_id"])
    return AttendanceEvent(
        user_id=r["user_id"],
        timestamp=as_utc(r["event_time"]),
        status=PresenceStatus(r["status"]),
        event_id=event_id,
        sequence=event_id,
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def _cursor(self, action: str):
        try:
            with db_cursor(self._conn_factory) as (conn, cur):
                yield conn, cur
        except _TRANSIENT_ERRORS as e:
            _LOGGER.error("MySQL error while trying to %s: %s", action, e)
            raise StorageUnavailable(f"event store unavailable ({action})") from e

    def load_latest(self, user_id: str, *, until: Optional[datetime] = None) -> Optional[AttendanceEvent]:
        clauses = ["user_id=%s"]
        params: list[object] = [user_id]
        if until is not None:
            clauses.append("event_time<=%s")
            params.append(to_naive_utc(until))

        with self._cursor("load latest event") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE {" AND ".join(clauses)}
                ORDER BY event_time DESC, event_id DESC
                LIMIT 1
                """,
                tuple(params),
            )
            r = fetchone(cur)
        return _to_event(r) if r else None

    def load_range(
        self,
        user_id: str,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["user_id=%s"]
        params: list[object] = [user_id]
        if from_time is not None:
            clauses.append("event_time>=%s")
            params.append(to_naive_utc(from_time))
        if to_time is not None:
            clauses.append("event_time<=%s")
            params.append(to_naive_utc(to_time))

        with self._cursor("load event range") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE {" AND ".join(clauses)}
                ORDER BY event_time ASC, event_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
        return [_to_event(r) for r in rows]

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        with self._cursor("append event") as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_events(user_id, event_time, status)
                VALUES(%s,%s,%s)
                """,
                (event.user_id, to_naive_utc(event.timestamp), event.status.value),
            )
            new_id = int(cur.lastrowid)
        return event.stored(event_id=new_id, sequence=new_id)
