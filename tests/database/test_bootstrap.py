from __future__ import annotations

from pathlib import Path

from src.attendance_ledger.attendance_ledger.database.bootstrap import (
    _strip_comments,
    _strip_create_db_and_use,
    iter_sql_statements,
)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_splitter_keeps_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); SELECT \"x;y\"; SELECT 1"

    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", 'SELECT "x;y"', "SELECT 1"]


def test_schema_file_yields_only_the_events_table():
    sql = _strip_comments(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8")))
    statements = list(iter_sql_statements(sql))

    assert len(statements) == 1
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS attendance_events")
