from __future__ import annotations

import threading
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_SWEEP_INTERVAL_SECONDS
from ..core.logging_config import get_logger

logger = get_logger(__name__)


class Sweepable(Protocol):
    def sweep(self) -> int:
        raise NotImplementedError


class ExpirySweeper:
    """
    Background thread that evicts expired lockout and throttle records.

    Runs ``sweep()`` on each target every ``interval_seconds`` until ``stop()``.
    A failing target is logged and does not stop the loop.
    """

    def __init__(self, targets: Sequence[Sweepable], *, interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS):
        self._targets = list(targets)
        self._interval = float(interval_seconds)
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self) -> None:
        if self._is_running:
            logger.warning("Expiry sweeper already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="ExpirySweeper", daemon=True)
        self._is_running = True
        self._thread.start()
        logger.info("Expiry sweeper started (interval: %ss)", self._interval)

    def stop(self) -> None:
        if not self._is_running:
            return

        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
            if self._thread.is_alive():
                logger.warning("Expiry sweeper did not stop cleanly")

        self._is_running = False
        self._thread = None
        logger.info("Expiry sweeper stopped")

    def run_once(self) -> int:
        removed = 0
        for target in self._targets:
            try:
                removed += int(target.sweep() or 0)
            except Exception:
                logger.exception("Sweep failed for %s", type(target).__name__)
        if removed:
            logger.debug("Evicted %s expired records", removed)
        return removed

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            if self._stop_event.wait(timeout=self._interval):
                break
            self.run_once()
