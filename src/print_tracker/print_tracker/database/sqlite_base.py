from __future__ import annotations

import re
import sqlite3
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Sequence, TypeVar

from ..core.exceptions import (
    ConnectionFailure,
    ConstraintViolation,
    DataAccessError,
    DuplicateKeyError,
    MissingReferenceError,
)
from ..core.logging_config import get_logger
from .connection import ExecResult

logger = get_logger(__name__)

T = TypeVar("T")

_PLACEHOLDER = re.compile(r"%s")

sqlite3.register_adapter(Decimal, str)


def to_sqlite_sql(sql: str) -> str:
    """Rewrite ``%s`` placeholders to ``?``. Repositories never embed literal ``%s``."""
    return _PLACEHOLDER.sub("?", sql)


def translate_sqlite_error(exc: sqlite3.Error) -> DataAccessError:
    msg = str(exc)
    if isinstance(exc, sqlite3.IntegrityError):
        if "UNIQUE constraint failed" in msg:
            return DuplicateKeyError("Duplicate entry - record already exists", {"error": msg})
        if "FOREIGN KEY constraint failed" in msg:
            return MissingReferenceError("Referenced record does not exist", {"error": msg})
        return ConstraintViolation(msg, {"error": msg})
    if isinstance(exc, sqlite3.OperationalError) and ("locked" in msg or "unable to open" in msg):
        return ConnectionFailure("Database connection failed", {"error": msg})
    return DataAccessError(msg, {"error": msg})


def _dict_factory(cursor, row) -> Dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class _CursorSession:
    def __init__(self, cur):
        self._cur = cur

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self._cur.execute(to_sqlite_sql(sql), tuple(params))
        return list(self._cur.fetchall())

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        self._cur.execute(to_sqlite_sql(sql), tuple(params))
        return ExecResult(lastrowid=self._cur.lastrowid, rowcount=self._cur.rowcount)


class SQLiteDataAccess:
    """Single-file SQLite adapter (local installs and tests).

    Note: A fresh connection per operation, so report reads may run on worker threads.
    """

    dialect = "sqlite"

    def __init__(self, path: str | Path):
        self._path = str(path)

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self._path, timeout=10)
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc) from exc
        conn.row_factory = _dict_factory
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        conn = self._connect()
        try:
            cur = conn.cursor()
            try:
                yield cur
                conn.commit()
            finally:
                cur.close()
        except sqlite3.Error as exc:
            conn.rollback()
            raise translate_sqlite_error(exc) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        with self.cursor() as cur:
            cur.execute(to_sqlite_sql(sql), tuple(params))
            return list(cur.fetchall())

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        with self.cursor() as cur:
            cur.execute(to_sqlite_sql(sql), tuple(params))
            return ExecResult(lastrowid=cur.lastrowid, rowcount=cur.rowcount)

    def transaction(self, fn: Callable[[_CursorSession], T]) -> T:
        with self.cursor() as cur:
            return fn(_CursorSession(cur))

    def executescript(self, sql: str) -> None:
        with self.cursor() as cur:
            cur.executescript(sql)

    def ping(self) -> bool:
        rows = self.query("SELECT 1 AS ok")
        return bool(rows and rows[0].get("ok") == 1)

    def close(self) -> None:
        logger.debug("SQLite adapter closed (%s)", self._path)
