import os

from config.config import db_config_from_env, ledger_config_from_env

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

STORAGE_BACKEND = "memory"

DB_CONFIG = db_config_from_env()

LEDGER_CONFIG = ledger_config_from_env()

AUTO_INIT_DB = False
