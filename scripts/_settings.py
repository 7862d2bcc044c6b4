from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv  # noqa: E402

from config import get_settings_module  # noqa: E402

from src.print_tracker.print_tracker.database.connection import DataAccess, build_data_access  # noqa: E402


def load_settings():
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def data_access_for(settings) -> DataAccess:
    return build_data_access(
        backend=getattr(settings, "DB_BACKEND", "mysql"),
        db_config=dict(getattr(settings, "DB_CONFIG", {})),
        sqlite_path=getattr(settings, "SQLITE_PATH", None),
        retry_attempts=int(getattr(settings, "DB_RETRY_ATTEMPTS", 3)),
    )


def describe(settings) -> str:
    if getattr(settings, "DB_BACKEND", "mysql") == "sqlite":
        return f"sqlite:{settings.SQLITE_PATH}"
    db = settings.DB_CONFIG
    return f"{db.get('user')}@{db.get('host')}:{db.get('port', 3306)}/{db.get('database')}"
