SECRET_KEY = "test-secret"

LOCAL_STORE = "memory"
DATA_DIR = ""
STORAGE_PREFIX = "bb_"

SYNC_ENABLED = False
REMOTE_DB_CONFIG = {}

TRAILING_AWARD_DAYS = 30

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
