import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "backoffice_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

SALARY_CONFIG: dict = {}

# Short TTL so tests never observe stale lookups across cases.
CACHE_TTL_SECONDS = 1.0
PAYROLL_BATCH_SIZE = 5
LIQUIDATION_REGENERATION_MODE = "in_place"
