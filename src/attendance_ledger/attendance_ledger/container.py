from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.in_memory_event_repository import InMemoryEventRepository
from .attendance.ledger import AttendanceLedger, LedgerConfig
from .attendance.mysql_event_repository import MySQLEventRepository
from .attendance.repository import EventRepository
from .database.connection import DBConfig, DatabaseConnection


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    events_repo: EventRepository
    ledger: AttendanceLedger


def build_container(
    *,
    storage_backend: str = "memory",
    db_config: Optional[dict] = None,
    ledger_config: Optional[dict] = None,
) -> Container:
    backend = (storage_backend or "memory").strip().lower()
    conn: Optional[DatabaseConnection] = None

    if backend == "mysql":
        if not db_config:
            raise ValueError("db_config is required for the mysql storage backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        events_repo: EventRepository = MySQLEventRepository(conn)
    elif backend == "memory":
        events_repo = InMemoryEventRepository()
    else:
        raise ValueError(f"Unknown storage backend: {storage_backend!r}")

    ledger = AttendanceLedger(events_repo, config=LedgerConfig.from_settings(ledger_config or {}))

    return Container(conn=conn, events_repo=events_repo, ledger=ledger)
