"""Constants and defaults.

Note: Keep policy constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Overtime below this is noise and never paid.
MIN_OVERTIME_MINUTES = 30
MAX_OVERTIME_MINUTES = 240

MAX_DEDUCTIONS_RATIO = Decimal("0.5")
MAX_ADDITIONS_RATIO = Decimal("0.5")
ATTENDANCE_BONUS_WARNING_RATIO = Decimal("0.2")

CONSISTENCY_TOLERANCE = Decimal("0.01")
MAX_AMOUNT = Decimal("1000000")

# Liquidations use a fixed 30-day month, independent of the salary config.
LIQUIDATION_DAYS_PER_MONTH = 30
MIN_WORKED_DAYS_FOR_BENEFITS = 20

DEFAULT_BATCH_SIZE = 5
DEFAULT_CACHE_TTL_SECONDS = 300

DEFAULT_LIQUIDATION_PAYMENT_METHOD = "transfer"
DEFAULT_LIQUIDATION_PAYMENT_CONCEPT = "Liquidation payment"
