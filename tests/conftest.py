from __future__ import annotations

from pathlib import Path

import pytest

from src.print_tracker.print_tracker.database.bootstrap import (
    apply_schema,
    apply_seed_sql,
    ensure_demo_users,
    schema_path_for,
)
from src.print_tracker.print_tracker.database.sqlite_base import SQLiteDataAccess

REPO_ROOT = Path(__file__).resolve().parents[1]
DATABASE_DIR = REPO_ROOT / "database"


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sqlite_data(tmp_path):
    """Fresh SQLite database with the schema, the demo catalog and demo users."""
    data = SQLiteDataAccess(tmp_path / "print_tracker.sqlite3")
    apply_schema(data, schema_path=schema_path_for(DATABASE_DIR, "sqlite"))
    apply_seed_sql(data, seed_path=DATABASE_DIR / "seed.sql")
    ensure_demo_users(data)
    return data
