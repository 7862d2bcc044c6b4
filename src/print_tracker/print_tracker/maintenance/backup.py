"""Database backups.

MySQL is dumped with ``mysqldump`` (MySQL client tools must be installed);
SQLite is copied with the online backup API so a running app is not disturbed.
Backups are gzip-compressed and named ``<database>_<YYYYmmdd_HHMMSS>.sql.gz``
(or ``.sqlite3.gz``), newest kept, oldest removed by :func:`clean_old_backups`.
"""

from __future__ import annotations

import gzip
import os
import shutil
import sqlite3
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..core.constants import DEFAULT_BACKUP_KEEP
from ..core.exceptions import ValidationError
from ..core.logging_config import get_logger

logger = get_logger(__name__)

BACKUP_SUFFIXES = (".sql.gz", ".sqlite3.gz")


class BackupError(RuntimeError):
    pass


@dataclass(frozen=True)
class BackupFile:
    path: Path
    size_bytes: int
    created_at: datetime


def _timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


def _dump_mysql(db_config: dict, out_file: Path) -> None:
    cmd = [
        "mysqldump",
        f"-h{db_config.get('host', 'localhost')}",
        f"-P{int(db_config.get('port', 3306))}",
        f"-u{db_config.get('user', 'root')}",
        "--single-transaction",
        "--routines",
        str(db_config["database"]),
    ]
    env = {**os.environ, "MYSQL_PWD": str(db_config.get("password", ""))}

    try:
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=True, env=env)
    except FileNotFoundError:
        raise BackupError("mysqldump not found. Install the MySQL client tools.") from None
    except subprocess.CalledProcessError as exc:
        message = exc.stderr.decode("utf-8", errors="replace").strip()
        raise BackupError(f"mysqldump failed: {message}") from exc

    with gzip.open(out_file, "wb") as f:
        f.write(proc.stdout)


def _copy_sqlite(sqlite_path: str, out_file: Path) -> None:
    src_path = Path(sqlite_path)
    if not src_path.exists():
        raise BackupError(f"SQLite database not found: {src_path}")

    tmp_file = out_file.with_suffix("")
    src = sqlite3.connect(str(src_path))
    dst = sqlite3.connect(str(tmp_file))
    try:
        src.backup(dst)
    finally:
        dst.close()
        src.close()

    with tmp_file.open("rb") as f_in, gzip.open(out_file, "wb") as f_out:
        shutil.copyfileobj(f_in, f_out)
    tmp_file.unlink()


def create_backup(
    *,
    backend: str,
    backup_dir: str | Path,
    db_config: Optional[dict] = None,
    sqlite_path: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Write one compressed backup into ``backup_dir`` and return its path."""
    out_dir = Path(backup_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = _timestamp(now)

    backend = (backend or "mysql").lower()
    if backend == "mysql":
        if not db_config:
            raise ValidationError("db_config is required for MySQL backups")
        out_file = out_dir / f"{db_config['database']}_{ts}.sql.gz"
        _dump_mysql(db_config, out_file)
    elif backend == "sqlite":
        if not sqlite_path:
            raise ValidationError("sqlite_path is required for SQLite backups")
        out_file = out_dir / f"{Path(sqlite_path).stem}_{ts}.sqlite3.gz"
        _copy_sqlite(sqlite_path, out_file)
    else:
        raise ValidationError(f"Unsupported DB_BACKEND: {backend}")

    logger.info("Backup created: %s (%s bytes)", out_file, out_file.stat().st_size)
    return out_file


def list_backups(backup_dir: str | Path) -> List[BackupFile]:
    out_dir = Path(backup_dir)
    if not out_dir.exists():
        return []

    files = [p for p in out_dir.iterdir() if p.is_file() and p.name.endswith(BACKUP_SUFFIXES)]
    files.sort(key=lambda p: (p.stat().st_mtime, p.name), reverse=True)
    return [
        BackupFile(path=p, size_bytes=p.stat().st_size, created_at=datetime.fromtimestamp(p.stat().st_mtime))
        for p in files
    ]


def clean_old_backups(backup_dir: str | Path, keep: int = DEFAULT_BACKUP_KEEP) -> List[Path]:
    """Delete all but the newest ``keep`` backups. Returns what was removed."""
    if keep < 1:
        raise ValidationError("keep must be at least 1", field="keep")

    removed = []
    for backup in list_backups(backup_dir)[keep:]:
        backup.path.unlink()
        removed.append(backup.path)

    if removed:
        logger.info("Removed %s old backup(s) from %s", len(removed), backup_dir)
    return removed


class BackupService:
    """Backups for the configured database, with retention applied after each run."""

    def __init__(
        self,
        *,
        backend: str,
        backup_dir: str | Path,
        db_config: Optional[dict] = None,
        sqlite_path: Optional[str] = None,
        keep: int = DEFAULT_BACKUP_KEEP,
    ):
        self._backend = backend
        self._backup_dir = Path(backup_dir)
        self._db_config = db_config
        self._sqlite_path = sqlite_path
        self._keep = int(keep)

    def run(self) -> Path:
        path = create_backup(
            backend=self._backend,
            backup_dir=self._backup_dir,
            db_config=self._db_config,
            sqlite_path=self._sqlite_path,
        )
        clean_old_backups(self._backup_dir, self._keep)
        return path

    def list(self) -> List[BackupFile]:
        return list_backups(self._backup_dir)
