import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Local store: one JSON file per collection under DATA_DIR
LOCAL_STORE = os.getenv("LOCAL_STORE", "file")
DATA_DIR = os.getenv("DATA_DIR", "data")
STORAGE_PREFIX = os.getenv("STORAGE_PREFIX", "bb_")

# Remote mirror (optional)
SYNC_ENABLED = bool(int(os.getenv("SYNC_ENABLED", "0")))
REMOTE_DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "studio_register"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

TRAILING_AWARD_DAYS = int(os.getenv("TRAILING_AWARD_DAYS", "30"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled (and sync is on), schema.sql is applied to the remote DB on startup
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
