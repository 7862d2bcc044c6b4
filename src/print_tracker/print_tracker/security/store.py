"""Ephemeral TTL stores backing lockout and throttling state.

The in-memory store is process-local. A deployment running several server
processes needs a shared implementation of ``EphemeralStore`` (for example a
cache server); nothing in the guard or limiter assumes the in-memory one.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Generic, Hashable, List, Optional, Protocol, Tuple, TypeVar

V = TypeVar("V")


@dataclass
class _Entry(Generic[V]):
    value: V
    expires_at: float


class EphemeralStore(Protocol[V]):
    def get(self, key: Hashable) -> Optional[V]:
        raise NotImplementedError

    def set(self, key: Hashable, value: V, *, expires_at: float) -> None:
        raise NotImplementedError

    def delete(self, key: Hashable) -> None:
        raise NotImplementedError

    def items(self) -> List[Tuple[Hashable, V, float]]:
        raise NotImplementedError

    def evict_expired(self, now: float) -> List[Tuple[Hashable, V]]:
        raise NotImplementedError


class InMemoryStore(Generic[V]):
    """Dict-backed store; every entry carries its own expiry timestamp.

    ``get`` does not hide expired entries: callers decide what expiry means
    (a stale attempt window is restarted, a stale lock is dropped).
    """

    def __init__(self) -> None:
        self._data: Dict[Hashable, _Entry[V]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: Hashable) -> Optional[V]:
        with self._lock:
            entry = self._data.get(key)
            return entry.value if entry else None

    def set(self, key: Hashable, value: V, *, expires_at: float) -> None:
        with self._lock:
            self._data[key] = _Entry(value=value, expires_at=float(expires_at))

    def delete(self, key: Hashable) -> None:
        with self._lock:
            self._data.pop(key, None)

    def items(self) -> List[Tuple[Hashable, V, float]]:
        with self._lock:
            return [(k, e.value, e.expires_at) for k, e in self._data.items()]

    def evict_expired(self, now: float) -> List[Tuple[Hashable, V]]:
        with self._lock:
            expired = [k for k, e in self._data.items() if now > e.expires_at]
            return [(k, self._data.pop(k).value) for k in expired]
