from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from ..core.constants import DEFAULT_BLOCK_MINUTES, DEFAULT_RATE_LIMITS
from ..core.enums import LimitCategory
from ..core.logging_config import get_security_logger
from .store import EphemeralStore, InMemoryStore

security_log = get_security_logger()


@dataclass(frozen=True)
class RateLimitRule:
    window_seconds: int
    max_requests: int


@dataclass
class RateLimitCounter:
    count: int
    reset_at: float


@dataclass(frozen=True)
class BlockRecord:
    until: float
    reason: str


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    category: str
    limit: int
    remaining: int
    reset_at: float
    retry_after: Optional[int] = None
    blocked: bool = False


def rules_from_config(config: Optional[Mapping[str, Mapping[str, int]]] = None) -> Dict[str, RateLimitRule]:
    """Build rules from a ``{"login": {"window_seconds": .., "max_requests": ..}}`` mapping."""
    merged: Dict[str, RateLimitRule] = {}
    for name, values in {**DEFAULT_RATE_LIMITS, **dict(config or {})}.items():
        merged[str(name)] = RateLimitRule(
            window_seconds=int(values["window_seconds"]),
            max_requests=int(values["max_requests"]),
        )
    return merged


def with_login_floor(rules: Mapping[str, RateLimitRule], login_max_attempts: int) -> Dict[str, RateLimitRule]:
    """Raise the login rule to at least ``login_max_attempts`` requests per window.

    The per-account lockout must trip before the per-IP throttle rejects the
    attempts that would have caused it.
    """
    adjusted = dict(rules)
    name = LimitCategory.LOGIN.value
    rule = adjusted.get(name)
    if rule is not None and rule.max_requests < login_max_attempts:
        security_log.info(
            "Login rate limit raised from %s to %s to match the account lockout threshold",
            rule.max_requests,
            login_max_attempts,
        )
        adjusted[name] = RateLimitRule(window_seconds=rule.window_seconds, max_requests=int(login_max_attempts))
    return adjusted


class RateLimiter:
    """Fixed-window counters per (identifier, category) with escalation to a block.

    A source exceeding twice a category's limit inside one window is blocked
    for ``block_minutes`` across every category.
    """

    def __init__(
        self,
        rules: Optional[Mapping[str, RateLimitRule]] = None,
        *,
        block_minutes: int = DEFAULT_BLOCK_MINUTES,
        counters: Optional[EphemeralStore] = None,
        blocks: Optional[EphemeralStore] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._rules = dict(rules) if rules else rules_from_config()
        if LimitCategory.API.value not in self._rules:
            raise ValueError("Rate limit rules must define the 'api' category")
        self._block_seconds = int(block_minutes) * 60
        self._counters = counters if counters is not None else InMemoryStore()
        self._blocks = blocks if blocks is not None else InMemoryStore()
        self._clock = clock
        self._mutex = threading.Lock()

    def rule_for(self, category: str) -> tuple[str, RateLimitRule]:
        name = category.value if isinstance(category, LimitCategory) else str(category)
        if name not in self._rules:
            name = LimitCategory.API.value
        return name, self._rules[name]

    def _active_block(self, identifier: str, now: float) -> Optional[BlockRecord]:
        block = self._blocks.get(identifier)
        if block is None:
            return None
        if now > block.until:
            self._blocks.delete(identifier)
            return None
        return block

    def is_blocked(self, identifier: str) -> bool:
        return self._active_block(identifier, self._clock()) is not None

    def hit(self, identifier: str, category: str) -> RateDecision:
        """Count one request and decide whether it may proceed."""
        name, rule = self.rule_for(category)
        identifier = identifier or "unknown"

        with self._mutex:
            now = self._clock()

            block = self._active_block(identifier, now)
            if block is not None:
                return RateDecision(
                    allowed=False,
                    category=name,
                    limit=rule.max_requests,
                    remaining=0,
                    reset_at=block.until,
                    retry_after=max(1, math.ceil(block.until - now)),
                    blocked=True,
                )

            key = (identifier, name)
            counter = self._counters.get(key)
            if counter is None or now > counter.reset_at:
                counter = RateLimitCounter(count=0, reset_at=now + rule.window_seconds)
            counter.count += 1
            self._counters.set(key, counter, expires_at=counter.reset_at)

            if counter.count > rule.max_requests:
                retry_after = max(1, math.ceil(counter.reset_at - now))
                security_log.warning(
                    "Rate limit exceeded: identifier=%s category=%s count=%s limit=%s",
                    identifier,
                    name,
                    counter.count,
                    rule.max_requests,
                )
                if counter.count > rule.max_requests * 2:
                    until = now + self._block_seconds
                    self._blocks.set(identifier, BlockRecord(until=until, reason="Excessive requests"), expires_at=until)
                    security_log.warning(
                        "Client blocked: identifier=%s category=%s minutes=%s",
                        identifier,
                        name,
                        self._block_seconds // 60,
                    )
                return RateDecision(
                    allowed=False,
                    category=name,
                    limit=rule.max_requests,
                    remaining=0,
                    reset_at=counter.reset_at,
                    retry_after=retry_after,
                )

            return RateDecision(
                allowed=True,
                category=name,
                limit=rule.max_requests,
                remaining=rule.max_requests - counter.count,
                reset_at=counter.reset_at,
            )

    def sweep(self) -> int:
        now = self._clock()
        removed = self._counters.evict_expired(now)
        unblocked = self._blocks.evict_expired(now)
        for identifier, _ in unblocked:
            security_log.info("Client unblocked: identifier=%s", identifier)
        return len(removed) + len(unblocked)
