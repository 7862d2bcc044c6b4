from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an admin or a worker account.

    Note: Plain data object, no database access here.
    """

    user_id: int
    name: str
    username: str
    password_hash: str
    role: Role
    department: Optional[str] = None
    machine_id: Optional[int] = None
    last_active: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class UserSummary:
    """Admin listing row; never carries the password hash."""

    user_id: int
    name: str
    username: str
    role: Role
    department: Optional[str]
    machine_id: Optional[int]
    machine_name: Optional[str]
    last_active: Optional[datetime]
    created_at: Optional[datetime]
