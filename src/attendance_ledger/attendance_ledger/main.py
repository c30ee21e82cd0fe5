from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .core.constants import DEFAULT_LOG_LEVEL
from .database.bootstrap import apply_schema, list_tables

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int = DEFAULT_LOG_LEVEL) -> None:
    """Set the root level; adds a stderr handler unless one is already configured."""
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(level)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", DEFAULT_LOG_LEVEL))

    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    storage_backend = str(getattr(settings, "STORAGE_BACKEND", "memory"))
    db_config = dict(getattr(settings, "DB_CONFIG", {}))
    ledger_config = dict(getattr(settings, "LEDGER_CONFIG", {}))

    _LOGGER.info("settings=%s storage=%s", settings_module, storage_backend)
    if storage_backend == "mysql":
        _LOGGER.info(
            "db=%s@%s:%s/%s",
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            _LOGGER.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        storage_backend=storage_backend,
        db_config=db_config,
        ledger_config=ledger_config,
    )
    app.extensions["attendance_ledger"] = container

    register_attendance(app, container)

    return app
