import os

from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DB_BACKEND = "sqlite"
SQLITE_PATH = os.getenv("SQLITE_PATH", "print_tracker_test.sqlite3")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

# Throttling has its own unit tests; keep it out of the way of endpoint tests
RATE_LIMITS = {
    "login": {"window_seconds": 900, "max_requests": 1000},
    "api": {"window_seconds": 900, "max_requests": 10000},
    "strict": {"window_seconds": 3600, "max_requests": 1000},
}
ENABLE_SWEEPER = False
ENABLE_BACKUP_SCHEDULER = False
DB_RETRY_ATTEMPTS = 1

AUTO_INIT_DB = True
AUTO_SEED_DB = True
