from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import day_bounds
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.exceptions import DataAccessError, ValidationError
from ..core.logging_config import get_logger, redact
from .model import AuditEntry
from .repository import AuditRepository

logger = get_logger(__name__)

REDACTED_KEYS = ("password", "password_hash", "current_password", "new_password")


class AuditService:
    """Use case: append-only trail of successful mutating requests."""

    def __init__(self, audit: AuditRepository):
        self._audit = audit

    def record(
        self,
        *,
        action: str,
        user_id: Optional[int],
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Optional[int]:
        """Write one entry. A failed write is logged and never fails the request."""
        safe = redact(details or {}, REDACTED_KEYS)
        try:
            audit_id = self._audit.insert(
                user_id=user_id,
                action=action,
                details_json=json.dumps(safe, default=str),
                ip_address=ip_address,
                user_agent=user_agent,
            )
        except DataAccessError as exc:
            logger.error("Failed to create audit log: action=%s user_id=%s error=%s", action, user_id, exc)
            return None
        logger.info("Audit log created: action=%s user_id=%s", action, user_id)
        return audit_id

    def list_entries(
        self,
        *,
        user_id: Optional[int] = None,
        action: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
    ) -> Sequence[AuditEntry]:
        if not 1 <= int(limit) <= MAX_PAGE_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_LIMIT}", field="limit")
        if int(offset) < 0:
            raise ValidationError("Offset must be a non-negative integer", field="offset")
        return self._audit.list_entries(
            user_id=user_id,
            action=(action or "").strip() or None,
            start=day_bounds(start)[0] if start else None,
            end=day_bounds(end)[1] if end else None,
            limit=int(limit),
            offset=int(offset),
        )
