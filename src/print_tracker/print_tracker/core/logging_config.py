"""
Centralized logging configuration for the print tracker.

Log Format:
    2026-03-02 10:15:30 [INFO    ] [MainThread] print_tracker.jobs.service - Job created

Security events (lockouts, blocks, throttling) go to a dedicated child logger,
``print_tracker.security``, which also gets its own rotating file when file
logging is enabled. They are never logged at ERROR level.

Usage:
    # At application startup
    setup_logging(log_level=logging.INFO, enable_file_logging=True)

    # In modules
    logger = get_logger(__name__)
    security_log = get_security_logger()
"""

from __future__ import annotations

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

APP_LOGGER_NAME = "print_tracker"
SECURITY_LOGGER_NAME = f"{APP_LOGGER_NAME}.security"

_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5


class ThreadContextFilter(logging.Filter):
    """Adds ``thread_name`` to every record for the log format."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name
        return True


def _file_handler(path: Path, level: int, formatter: logging.Formatter, thread_filter: logging.Filter) -> RotatingFileHandler:
    handler = RotatingFileHandler(filename=path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(thread_filter)
    return handler


def setup_logging(
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = False,
) -> logging.Logger:
    """
    Configure the application logger tree.

    Sets up a console handler, and when ``enable_file_logging`` is set, an
    application log, an ERROR-only log and a security-event log under
    ``log_dir`` (default: ./logs).

    Returns:
        The configured ``print_tracker`` logger
    """
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    thread_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    security_logger = logging.getLogger(SECURITY_LOGGER_NAME)
    security_logger.handlers.clear()

    if enable_file_logging:
        log_dir = Path(log_dir) if log_dir else Path.cwd() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.addHandler(_file_handler(log_dir / f"{APP_LOGGER_NAME}.log", log_level, formatter, thread_filter))
        logger.addHandler(_file_handler(log_dir / f"{APP_LOGGER_NAME}_error.log", logging.ERROR, formatter, thread_filter))
        security_logger.addHandler(
            _file_handler(log_dir / f"{APP_LOGGER_NAME}_security.log", logging.INFO, formatter, thread_filter)
        )
        logger.info("File logging enabled: %s", log_dir)

    logger.info("Logging configured at level %s", logging.getLevelName(log_level))
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger under the ``print_tracker`` namespace.

    ``src.print_tracker.print_tracker.jobs.service`` becomes
    ``print_tracker.jobs.service``.
    """
    if name.startswith(APP_LOGGER_NAME):
        return logging.getLogger(name)

    marker = f"{APP_LOGGER_NAME}.{APP_LOGGER_NAME}."
    if marker in name:
        name = name.split(marker, 1)[1]
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def get_security_logger() -> logging.Logger:
    return logging.getLogger(SECURITY_LOGGER_NAME)


def redact(data: dict, keys: tuple[str, ...] = ("password", "password_hash", "current_password", "new_password")) -> dict:
    """Copy of ``data`` with credential fields replaced by ``[REDACTED]``."""
    out = {}
    for k, v in (data or {}).items():
        if k in keys:
            out[k] = "[REDACTED]"
        elif isinstance(v, dict):
            out[k] = redact(v, keys)
        else:
            out[k] = v
    return out
