from __future__ import annotations

import json
from typing import Optional, Sequence

from ..common.datetime_utils import as_datetime
from ..database.connection import DataAccess
from .model import AuditEntry
from .repository import AuditRepository


def _load_details(raw) -> dict:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return {"raw": str(raw)}
    return data if isinstance(data, dict) else {"value": data}


class SQLAuditRepository(AuditRepository):
    def __init__(self, data: DataAccess):
        self._data = data

    def insert(
        self,
        *,
        user_id: Optional[int],
        action: str,
        details_json: str,
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> int:
        res = self._data.execute(
            "INSERT INTO audit_logs (user_id, action, details, ip_address, user_agent) VALUES (%s, %s, %s, %s, %s)",
            (user_id, action, details_json, ip_address, user_agent),
        )
        return int(res.lastrowid)

    def list_entries(
        self,
        *,
        user_id: Optional[int] = None,
        action: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[AuditEntry]:
        where: list[str] = []
        params: list = []
        if user_id is not None:
            where.append("a.user_id = %s")
            params.append(user_id)
        if action:
            where.append("a.action = %s")
            params.append(action)
        if start:
            where.append("a.created_at >= %s")
            params.append(start)
        if end:
            where.append("a.created_at <= %s")
            params.append(end)

        sql = """
            SELECT a.id, a.user_id, u.username, a.action, a.details, a.ip_address, a.user_agent, a.created_at
            FROM audit_logs a
            LEFT JOIN users u ON a.user_id = u.id
        """
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY a.created_at DESC, a.id DESC LIMIT %s OFFSET %s"
        params.extend([int(limit), int(offset)])

        rows = self._data.query(sql, tuple(params))
        return [
            AuditEntry(
                audit_id=int(r["id"]),
                user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
                username=r.get("username"),
                action=r["action"],
                details=_load_details(r.get("details")),
                ip_address=r.get("ip_address"),
                user_agent=r.get("user_agent"),
                created_at=as_datetime(r.get("created_at")),
            )
            for r in rows
        ]
