from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 10


@dataclass(frozen=True)
class ExecResult:
    lastrowid: Optional[int]
    rowcount: int


class Session(Protocol):
    """Statement executor bound to one borrowed connection (used inside transactions)."""

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        raise NotImplementedError


class DataAccess(Protocol):
    """Dialect-neutral data access used by every repository.

    SQL is written with ``%s`` placeholders. Each call borrows a connection and
    releases it on completion, success or failure. Errors surface as
    ``DataAccessError`` subtypes.
    """

    dialect: str

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        raise NotImplementedError

    def transaction(self, fn: Callable[[Session], T]) -> T:
        raise NotImplementedError

    def ping(self) -> bool:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


def build_data_access(
    *,
    backend: str,
    db_config: Optional[dict] = None,
    sqlite_path: Optional[str] = None,
    retry_attempts: int = 3,
    retry_backoff_seconds: float = 0.5,
) -> DataAccess:
    """Pick the dialect adapter once, at startup."""
    backend = (backend or "mysql").lower()

    if backend == "sqlite":
        from .sqlite_base import SQLiteDataAccess

        return SQLiteDataAccess(sqlite_path or "print_tracker.sqlite3")

    if backend == "mysql":
        from .mysql_base import MySQLDataAccess

        db_config = db_config or {}
        config = DBConfig(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "print_tracker")),
            pool_size=int(db_config.get("pool_size", 10)),
        )
        return MySQLDataAccess(config, retry_attempts=retry_attempts, retry_backoff_seconds=retry_backoff_seconds)

    raise ValueError(f"Unsupported DB_BACKEND: {backend!r}")
