"""Settings shared by every environment, read from environment variables.

The per-environment modules import from here and override what differs.
"""

import json
import os


def env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_rate_limits(name: str = "RATE_LIMITS") -> dict:
    # JSON, e.g. {"login": {"window_seconds": 900, "max_requests": 5}}
    raw = os.getenv(name)
    return json.loads(raw) if raw else {}


DB_BACKEND = os.getenv("DB_BACKEND", "mysql").lower()

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "print_tracker"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "10")),
}
SQLITE_PATH = os.getenv("SQLITE_PATH", "print_tracker.sqlite3")

DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))
DB_RETRY_BACKOFF_SECONDS = float(os.getenv("DB_RETRY_BACKOFF_SECONDS", "0.5"))

LOGIN_MAX_ATTEMPTS = int(os.getenv("LOGIN_MAX_ATTEMPTS", "10"))
LOGIN_ATTEMPT_WINDOW_MINUTES = int(os.getenv("LOGIN_ATTEMPT_WINDOW_MINUTES", "15"))
LOCKOUT_MINUTES = int(os.getenv("LOCKOUT_MINUTES", "15"))

RATE_LIMITS = env_rate_limits()
RATE_LIMIT_BLOCK_MINUTES = int(os.getenv("RATE_LIMIT_BLOCK_MINUTES", "30"))
SWEEP_INTERVAL_SECONDS = int(os.getenv("SWEEP_INTERVAL_SECONDS", "300"))
ENABLE_SWEEPER = env_bool("ENABLE_SWEEPER", True)

REPORT_MAX_WORKERS = int(os.getenv("REPORT_MAX_WORKERS", "5"))

BACKUP_DIR = os.getenv("BACKUP_DIR", "backups")
BACKUP_KEEP = int(os.getenv("BACKUP_KEEP", "30"))
ENABLE_BACKUP_SCHEDULER = env_bool("ENABLE_BACKUP_SCHEDULER", False)
# Local time of the daily backup, HH:MM
BACKUP_TIME = os.getenv("BACKUP_TIME", "02:00")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")
ENABLE_FILE_LOGGING = env_bool("ENABLE_FILE_LOGGING", False)

CURRENCY = os.getenv("CURRENCY", "USD")
