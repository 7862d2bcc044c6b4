"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

MONEY_QUANT = Decimal("0.01")
MEASURE_QUANT = Decimal("0.0001")
CM_PER_METER = Decimal("100")

# DECIMAL(10, 2) and INT column limits
MAX_STORED_DECIMAL = Decimal("99999999.99")
MAX_STORED_INT = 2147483647

DEFAULT_LOGIN_MAX_ATTEMPTS = 10
DEFAULT_LOGIN_ATTEMPT_WINDOW_MINUTES = 15
DEFAULT_LOCKOUT_MINUTES = 15

DEFAULT_RATE_LIMITS = {
    "login": {"window_seconds": 15 * 60, "max_requests": 5},
    "api": {"window_seconds": 60, "max_requests": 100},
    "upload": {"window_seconds": 60, "max_requests": 10},
    "strict": {"window_seconds": 60, "max_requests": 30},
}
DEFAULT_BLOCK_MINUTES = 30
DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60

DEFAULT_PAGE_LIMIT = 100
MAX_PAGE_LIMIT = 500
MAX_DESCRIPTION_LENGTH = 1000

DEFAULT_BACKUP_KEEP = 30
DEFAULT_BACKUP_TIME = "02:00"

DELETED_WORKER_LABEL = "Deleted User"
