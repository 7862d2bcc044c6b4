from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..core.logging_config import get_logger
from .connection import DataAccess

logger = get_logger(__name__)

SCHEMA_FILES = {
    "mysql": "schema.mysql.sql",
    "sqlite": "schema.sqlite.sql",
}


def schema_path_for(database_dir: str | Path, dialect: str) -> Path:
    return Path(database_dir) / SCHEMA_FILES[dialect]


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema files compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(data: DataAccess, sql: str) -> int:
    count = 0

    def _run(session) -> None:
        nonlocal count
        for stmt in _iter_sql_statements(_strip_comments(_strip_create_db_and_use(sql))):
            session.execute(stmt)
            count += 1

    data.transaction(_run)
    return count


def ensure_database_exists(db_config: dict) -> None:
    """MySQL only: create the target database before the pool connects to it."""
    conn = mysql.connector.connect(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{db_config['database']}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(data: DataAccess, *, schema_path: str | Path) -> None:
    sql = Path(schema_path).read_text(encoding="utf-8")
    count = _exec_sql(data, sql)
    logger.info("Applied schema %s (%s statements)", Path(schema_path).name, count)


def apply_seed_sql(data: DataAccess, *, seed_path: str | Path) -> None:
    sql = Path(seed_path).read_text(encoding="utf-8")
    count = _exec_sql(data, sql)
    logger.info("Applied seed %s (%s statements)", Path(seed_path).name, count)


def ensure_demo_users(data: DataAccess) -> None:
    def get_machine_id(session, name: str):
        rows = session.query("SELECT id FROM machines WHERE name=%s", (name,))
        return int(rows[0]["id"]) if rows else None

    def upsert_user(session, name: str, username: str, password: str, role: Role, machine_id) -> None:
        password_hash = generate_password_hash(password)
        existing = session.query("SELECT id FROM users WHERE username=%s", (username,))
        if existing:
            session.execute(
                "UPDATE users SET name=%s, password_hash=%s, role=%s, machine_id=%s WHERE username=%s",
                (name, password_hash, role.value, machine_id, username),
            )
        else:
            session.execute(
                "INSERT INTO users (name, username, password_hash, role, machine_id) VALUES (%s, %s, %s, %s, %s)",
                (name, username, password_hash, role.value, machine_id),
            )

    def _run(session) -> None:
        large_format = get_machine_id(session, "Roland VG3-640")
        digital_press = get_machine_id(session, "Konica Minolta C4080")
        upsert_user(session, "Admin Demo", "admin", "Admin#2026", Role.ADMIN, None)
        upsert_user(session, "Grace Large", "grace", "Worker#2026", Role.WORKER, large_format)
        upsert_user(session, "Dan Digital", "dan", "Worker#2026", Role.WORKER, digital_press)

    data.transaction(_run)
    logger.info("Demo users ready")


def list_tables(data: DataAccess) -> list[str]:
    if data.dialect == "sqlite":
        rows = data.query("SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'")
        return [r["name"] for r in rows]
    rows = data.query("SHOW TABLES")
    return [next(iter(r.values())) for r in rows]
