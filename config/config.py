"""Shared settings read from the environment.

Settings modules (development/testing/production) start from these values
and override what differs per environment.
"""
import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def db_config_from_env(*, default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "attendance_ledger"),
        "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
    }


def ledger_config_from_env() -> dict:
    return {
        "OUT_OF_ORDER_TOLERANCE_SECONDS": float(os.getenv("OUT_OF_ORDER_TOLERANCE_SECONDS", "0")),
        "FUTURE_SKEW_TOLERANCE_SECONDS": float(os.getenv("FUTURE_SKEW_TOLERANCE_SECONDS", "0")),
    }
