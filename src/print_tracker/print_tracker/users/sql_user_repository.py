from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import as_datetime, format_datetime, now_local
from ..core.enums import Role
from ..database.connection import DataAccess
from .model import User, UserSummary
from .repository import UserRepository

_SELECT_USER = """
    SELECT id, name, username, password_hash, role, department, machine_id, last_active, created_at
    FROM users
"""


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        name=row["name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        department=row.get("department"),
        machine_id=int(row["machine_id"]) if row.get("machine_id") is not None else None,
        last_active=as_datetime(row.get("last_active")),
        created_at=as_datetime(row.get("created_at")),
    )


class SQLUserRepository(UserRepository):
    def __init__(self, data: DataAccess):
        self._data = data

    def get_by_id(self, user_id: int) -> Optional[User]:
        rows = self._data.query(_SELECT_USER + " WHERE id = %s", (user_id,))
        return _row_to_user(rows[0]) if rows else None

    def get_by_username(self, username: str) -> Optional[User]:
        rows = self._data.query(_SELECT_USER + " WHERE username = %s", (username,))
        return _row_to_user(rows[0]) if rows else None

    def create_user(
        self,
        *,
        name: str,
        username: str,
        password_hash: str,
        role: Role,
        machine_id: Optional[int],
        department: Optional[str],
    ) -> int:
        res = self._data.execute(
            """
            INSERT INTO users (name, username, password_hash, role, machine_id, department)
            VALUES (%s, %s, %s, %s, %s, %s)
            """,
            (name, username, password_hash, role.value, machine_id, department),
        )
        return int(res.lastrowid)

    def delete_by_id(self, user_id: int) -> bool:
        res = self._data.execute("DELETE FROM users WHERE id = %s", (user_id,))
        return res.rowcount > 0

    def list_all(self) -> Sequence[UserSummary]:
        rows = self._data.query(
            """
            SELECT u.id, u.name, u.username, u.role, u.department, u.machine_id,
                   m.name AS machine_name, u.last_active, u.created_at
            FROM users u
            LEFT JOIN machines m ON u.machine_id = m.id
            ORDER BY u.role, u.name
            """
        )
        return [
            UserSummary(
                user_id=int(r["id"]),
                name=r["name"],
                username=r["username"],
                role=Role(r["role"]),
                department=r.get("department"),
                machine_id=int(r["machine_id"]) if r.get("machine_id") is not None else None,
                machine_name=r.get("machine_name"),
                last_active=as_datetime(r.get("last_active")),
                created_at=as_datetime(r.get("created_at")),
            )
            for r in rows
        ]

    def touch_last_active(self, user_id: int) -> None:
        self._data.execute(
            "UPDATE users SET last_active = %s WHERE id = %s",
            (format_datetime(now_local()), user_id),
        )

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        res = self._data.execute("UPDATE users SET password_hash = %s WHERE id = %s", (password_hash, user_id))
        return res.rowcount > 0
