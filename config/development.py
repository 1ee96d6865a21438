import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "backoffice_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Overrides merged onto the default SalaryConfig, validated at startup.
SALARY_CONFIG = {
    "overtime_multiplier": os.getenv("OVERTIME_MULTIPLIER", "1.5"),
    "holiday_multiplier": os.getenv("HOLIDAY_MULTIPLIER", "2.0"),
    "working_hours_per_day": int(os.getenv("WORKING_HOURS_PER_DAY", "8")),
    "working_days_per_month": int(os.getenv("WORKING_DAYS_PER_MONTH", "30")),
}

CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "300"))
PAYROLL_BATCH_SIZE = int(os.getenv("PAYROLL_BATCH_SIZE", "5"))
LIQUIDATION_REGENERATION_MODE = os.getenv("LIQUIDATION_REGENERATION_MODE", "in_place")
