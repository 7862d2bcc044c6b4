from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..core.constants import (
    DEFAULT_LOCKOUT_MINUTES,
    DEFAULT_LOGIN_ATTEMPT_WINDOW_MINUTES,
    DEFAULT_LOGIN_MAX_ATTEMPTS,
)
from ..core.logging_config import get_security_logger
from .store import EphemeralStore, InMemoryStore

security_log = get_security_logger()


@dataclass
class LoginAttemptRecord:
    count: int
    reset_at: float
    failures: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class AccountLock:
    until: float
    reason: str


@dataclass(frozen=True)
class AttemptResult:
    allowed: bool
    locked: bool = False
    remaining_attempts: Optional[int] = None


@dataclass(frozen=True)
class LockStatus:
    locked: bool
    minutes_remaining: int = 0
    reason: Optional[str] = None


class LoginAttemptGuard:
    """Per-(username, ip) failure counting with username-scoped lockout.

    Attempt windows and locks run on independent clocks: a lock can outlive
    the attempt window that produced it.
    """

    def __init__(
        self,
        *,
        attempts: Optional[EphemeralStore] = None,
        locks: Optional[EphemeralStore] = None,
        max_attempts: int = DEFAULT_LOGIN_MAX_ATTEMPTS,
        window_minutes: int = DEFAULT_LOGIN_ATTEMPT_WINDOW_MINUTES,
        lockout_minutes: int = DEFAULT_LOCKOUT_MINUTES,
        clock: Callable[[], float] = time.time,
    ):
        self._attempts = attempts if attempts is not None else InMemoryStore()
        self._locks = locks if locks is not None else InMemoryStore()
        self._max_attempts = int(max_attempts)
        self._window_seconds = int(window_minutes) * 60
        self._lockout_seconds = int(lockout_minutes) * 60
        self._clock = clock
        self._mutex = threading.Lock()

    @property
    def lockout_minutes(self) -> int:
        return self._lockout_seconds // 60

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @staticmethod
    def _key(username: str, ip: str) -> tuple[str, str]:
        return (username, ip or "unknown")

    def _lock(self, username: str, reason: str, now: float) -> None:
        until = now + self._lockout_seconds
        self._locks.set(username, AccountLock(until=until, reason=reason), expires_at=until)
        security_log.warning("Account locked: username=%s reason=%s minutes=%s", username, reason, self.lockout_minutes)

    def record_attempt(self, username: str, ip: str, success: bool) -> AttemptResult:
        key = self._key(username, ip)
        with self._mutex:
            now = self._clock()

            if success:
                self._attempts.delete(key)
                self._locks.delete(username)
                return AttemptResult(allowed=True)

            record = self._attempts.get(key)
            if record is None or now > record.reset_at:
                record = LoginAttemptRecord(count=0, reset_at=now + self._window_seconds)

            record.count += 1
            record.failures.append(now)
            self._attempts.set(key, record, expires_at=record.reset_at)

            security_log.warning(
                "Failed login attempt: username=%s ip=%s count=%s max=%s",
                username,
                ip,
                record.count,
                self._max_attempts,
            )

            if record.count >= self._max_attempts:
                self._lock(username, "Too many failed login attempts", now)
                return AttemptResult(allowed=False, locked=True, remaining_attempts=0)

            return AttemptResult(allowed=True, remaining_attempts=self._max_attempts - record.count)

    def _active_lock(self, username: str, now: float) -> Optional[AccountLock]:
        lock = self._locks.get(username)
        if lock is None:
            return None
        if now > lock.until:
            self._locks.delete(username)
            return None
        return lock

    def is_locked(self, username: str) -> bool:
        return self._active_lock(username, self._clock()) is not None

    def check_allowed(self, username: str) -> LockStatus:
        """Gate run before credential verification; does not consume an attempt."""
        now = self._clock()
        lock = self._active_lock(username, now)
        if lock is None:
            return LockStatus(locked=False)
        minutes = max(1, math.ceil((lock.until - now) / 60))
        return LockStatus(locked=True, minutes_remaining=minutes, reason=lock.reason)

    def sweep(self) -> int:
        now = self._clock()
        removed = self._attempts.evict_expired(now)
        unlocked = self._locks.evict_expired(now)
        for username, _ in unlocked:
            security_log.info("Account unlocked: username=%s", username)
        return len(removed) + len(unlocked)
