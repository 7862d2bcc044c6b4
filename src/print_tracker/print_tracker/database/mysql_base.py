from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, TypeVar

import mysql.connector
from mysql.connector import errorcode, errors, pooling

from ..core.exceptions import (
    ConnectionFailure,
    ConstraintViolation,
    DataAccessError,
    DuplicateKeyError,
    MissingReferenceError,
)
from ..core.logging_config import get_logger
from .connection import DBConfig, ExecResult

logger = get_logger(__name__)

T = TypeVar("T")

_MISSING_REFERENCE_CODES = {
    errorcode.ER_NO_REFERENCED_ROW,
    errorcode.ER_NO_REFERENCED_ROW_2,
    errorcode.ER_ROW_IS_REFERENCED,
    errorcode.ER_ROW_IS_REFERENCED_2,
}


def translate_mysql_error(exc: mysql.connector.Error) -> DataAccessError:
    """Map a connector error onto the DataAccessError taxonomy."""
    errno = getattr(exc, "errno", None)
    details = {"errno": errno, "sqlstate": getattr(exc, "sqlstate", None)}

    if errno == errorcode.ER_DUP_ENTRY:
        return DuplicateKeyError("Duplicate entry - record already exists", details)
    if errno in _MISSING_REFERENCE_CODES:
        return MissingReferenceError("Referenced record does not exist", details)
    if isinstance(exc, errors.IntegrityError):
        return ConstraintViolation(str(exc), details)
    if isinstance(exc, (errors.InterfaceError, errors.OperationalError, errors.PoolError)):
        return ConnectionFailure("Database connection failed", details)
    return DataAccessError(str(exc), details)


class _CursorSession:
    def __init__(self, cur):
        self._cur = cur

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self._cur.execute(sql, tuple(params))
        return fetchall(self._cur)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        self._cur.execute(sql, tuple(params))
        return ExecResult(lastrowid=self._cur.lastrowid, rowcount=self._cur.rowcount)


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


class MySQLDataAccess:
    """Pooled MySQL adapter.

    Note: A connection is borrowed per operation and returned to the pool by
    ``close()``. Only connection-class failures are retried, and only while
    acquiring a connection or running a read, so writes are never replayed.
    """

    dialect = "mysql"

    def __init__(self, config: DBConfig, *, retry_attempts: int = 3, retry_backoff_seconds: float = 0.5):
        self._config = config
        self._retry_attempts = max(1, int(retry_attempts))
        self._backoff = float(retry_backoff_seconds)
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is not None:
            return self._pool
        with self._pool_lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="print_tracker",
                    pool_size=int(self._config.pool_size),
                    host=self._config.host,
                    port=int(self._config.port),
                    user=self._config.user,
                    password=self._config.password,
                    database=self._config.database,
                    autocommit=False,
                )
                logger.info(
                    "MySQL pool ready: %s@%s:%s/%s (size=%s)",
                    self._config.user,
                    self._config.host,
                    self._config.port,
                    self._config.database,
                    self._config.pool_size,
                )
        return self._pool

    def _with_retry(self, op: Callable[[], T], *, description: str) -> T:
        for attempt in range(1, self._retry_attempts + 1):
            try:
                return op()
            except ConnectionFailure as exc:
                if attempt >= self._retry_attempts:
                    logger.error("%s failed after %s attempts: %s", description, attempt, exc)
                    raise
                delay = self._backoff * (2 ** (attempt - 1))
                logger.warning("%s failed (attempt %s/%s), retrying in %.2fs", description, attempt, self._retry_attempts, delay)
                time.sleep(delay)
        raise AssertionError("unreachable")

    def _acquire(self):
        def _get():
            try:
                return self._get_pool().get_connection()
            except mysql.connector.Error as exc:
                raise translate_mysql_error(exc) from exc

        return self._with_retry(_get, description="Acquire connection")

    @contextmanager
    def cursor(self) -> Iterator[Any]:
        conn = self._acquire()
        try:
            cur = conn.cursor(dictionary=True)
            try:
                yield cur
                conn.commit()
            finally:
                cur.close()
        except mysql.connector.Error as exc:
            conn.rollback()
            raise translate_mysql_error(exc) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        def _run():
            with self.cursor() as cur:
                cur.execute(sql, tuple(params))
                return fetchall(cur)

        return self._with_retry(_run, description="Query")

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        with self.cursor() as cur:
            cur.execute(sql, tuple(params))
            return ExecResult(lastrowid=cur.lastrowid, rowcount=cur.rowcount)

    def transaction(self, fn: Callable[[_CursorSession], T]) -> T:
        with self.cursor() as cur:
            return fn(_CursorSession(cur))

    def ping(self) -> bool:
        rows = self.query("SELECT 1 AS ok")
        return bool(rows and rows[0].get("ok") == 1)

    def close(self) -> None:
        # mysql-connector pools have no explicit shutdown; drop the reference.
        self._pool = None
