from __future__ import annotations

import threading
from datetime import datetime, time, timedelta
from typing import Callable, Optional, Union

from ..core.constants import DEFAULT_BACKUP_TIME
from ..core.exceptions import ValidationError
from ..core.logging_config import get_logger
from .backup import BackupService

logger = get_logger(__name__)


def parse_backup_time(value: Union[str, time]) -> time:
    """``"HH:MM"`` to a ``time``; a ``time`` passes through."""
    if isinstance(value, time):
        return value
    try:
        hours, minutes = str(value).strip().split(":")
        return time(int(hours), int(minutes))
    except ValueError:
        raise ValidationError(f"Invalid backup time: {value!r}, expected HH:MM", field="BACKUP_TIME") from None


def seconds_until(run_at: time, now: datetime) -> float:
    """Seconds from ``now`` to the next ``run_at``; a time already passed today means tomorrow."""
    target = datetime.combine(now.date(), run_at)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class BackupScheduler:
    """
    Daily backup in a background thread.

    At ``run_at`` (local time) every day, calls ``BackupService.run()``, which
    writes a backup and applies retention. A failed run is logged and the
    next day's run still happens.
    """

    def __init__(
        self,
        service: BackupService,
        *,
        run_at: Union[str, time] = DEFAULT_BACKUP_TIME,
        now: Callable[[], datetime] = datetime.now,
    ):
        self._service = service
        self._run_at = parse_backup_time(run_at)
        self._now = now
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def run_at(self) -> time:
        return self._run_at

    def start(self) -> None:
        if self._is_running:
            logger.warning("Backup scheduler already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="BackupScheduler", daemon=True)
        self._is_running = True
        self._thread.start()
        logger.info("Backup scheduler started (daily at %s)", self._run_at.strftime("%H:%M"))

    def stop(self) -> None:
        if not self._is_running:
            return

        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
            if self._thread.is_alive():
                logger.warning("Backup scheduler did not stop cleanly")

        self._is_running = False
        self._thread = None
        logger.info("Backup scheduler stopped")

    def run_once(self) -> bool:
        logger.info("Starting scheduled backup")
        try:
            path = self._service.run()
        except Exception:
            logger.exception("Scheduled backup failed")
            return False
        logger.info("Scheduled backup completed: %s", path)
        return True

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            delay = seconds_until(self._run_at, self._now())
            if self._stop_event.wait(timeout=delay):
                break
            self.run_once()
