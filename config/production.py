import os

from config.config import db_config_from_env, env_flag, ledger_config_from_env

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

DB_CONFIG = db_config_from_env()

LEDGER_CONFIG = ledger_config_from_env()

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
