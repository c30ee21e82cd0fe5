"""Example: drive the ledger directly (no Flask).

Controllers are a thin layer; every rule lives in AttendanceLedger.
"""

import importlib
from datetime import datetime, timedelta, timezone

from config import get_settings_module

from src.attendance_ledger.attendance_ledger.container import build_container
from src.attendance_ledger.attendance_ledger.core.exceptions import LedgerError
from src.attendance_ledger.attendance_ledger.main import configure_logging


def main():
    settings = importlib.import_module(get_settings_module())
    configure_logging("INFO")
    container = build_container(
        storage_backend=settings.STORAGE_BACKEND,
        db_config=settings.DB_CONFIG,
        ledger_config=settings.LEDGER_CONFIG,
    )
    ledger = container.ledger

    start = datetime.now(timezone.utc) - timedelta(hours=8)
    ledger.record_event("demo-user", "IN", start)
    ledger.record_event("demo-user", "OUT", start + timedelta(hours=4))
    try:
        ledger.record_event("demo-user", "OUT", start + timedelta(hours=5))
    except LedgerError as e:
        print(f"rejected: {e.code} {e}")

    print("status:", ledger.current_status("demo-user").value)
    for event in ledger.history("demo-user"):
        print(event.as_dict())


if __name__ == "__main__":
    main()
