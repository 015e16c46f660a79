import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

LOCAL_STORE = os.getenv("LOCAL_STORE", "file")
DATA_DIR = os.getenv("DATA_DIR", "/var/lib/studio-register")
STORAGE_PREFIX = os.getenv("STORAGE_PREFIX", "bb_")

SYNC_ENABLED = bool(int(os.getenv("SYNC_ENABLED", "1")))
REMOTE_DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "studio_register"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

TRAILING_AWARD_DAYS = int(os.getenv("TRAILING_AWARD_DAYS", "30"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
