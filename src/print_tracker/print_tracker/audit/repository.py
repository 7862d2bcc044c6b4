from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AuditEntry


class AuditRepository(Protocol):
    def insert(
        self,
        *,
        user_id: Optional[int],
        action: str,
        details_json: str,
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> int:
        raise NotImplementedError

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
        raise NotImplementedError
