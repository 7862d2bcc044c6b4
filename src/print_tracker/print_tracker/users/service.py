from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.sanitize import sanitize_text
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import (
    AccountLockedError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from ..core.logging_config import get_logger, get_security_logger
from ..machines.repository import MachineRepository
from ..security.login_attempts import LoginAttemptGuard
from .model import UserSummary
from .password_policy import require_strong_password
from .repository import UserRepository

logger = get_logger(__name__)
security_log = get_security_logger()

_USERNAME = re.compile(r"^[A-Za-z0-9_]{3,100}$")


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    username: str
    role: Role
    department: Optional[str]
    machine_id: Optional[int]


class AuthService:
    """Use case: authenticate a user (login) behind the lockout guard."""

    def __init__(self, users: UserRepository, guard: LoginAttemptGuard):
        self._users = users
        self._guard = guard

    def _verify(self, password_hash: str, password: str) -> bool:
        try:
            return check_password_hash(password_hash, password)
        except (TypeError, ValueError):
            # Placeholder or corrupted hashes never match.
            return False

    def authenticate(self, username: str, password: str, ip: str) -> SessionUser:
        if not isinstance(username, (str, type(None))) or not isinstance(password, (str, type(None))):
            raise ValidationError("Username and password must be strings")
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required")

        status = self._guard.check_allowed(username)
        if status.locked:
            security_log.warning("Login attempt on locked account: username=%s ip=%s", username, ip)
            raise AccountLockedError(username, status.minutes_remaining)

        user = self._users.get_by_username(username)
        if not user or not self._verify(user.password_hash, password):
            result = self._guard.record_attempt(username, ip, success=False)
            if result.locked:
                raise AccountLockedError(username, self._guard.lockout_minutes)
            raise AuthenticationError(
                f"Invalid credentials. {result.remaining_attempts} attempts remaining.",
                {"remaining_attempts": result.remaining_attempts},
            )

        self._guard.record_attempt(username, ip, success=True)
        self._users.touch_last_active(user.user_id)
        logger.info("User logged in: id=%s username=%s role=%s ip=%s", user.user_id, user.username, user.role.value, ip)

        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            username=user.username,
            role=user.role,
            department=user.department,
            machine_id=user.machine_id,
        )

    def change_password(self, *, user_id: int, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not self._verify(user.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")

        require_strong_password(new_password, "new_password")
        if new_password == current_password:
            raise ValidationError("New password must differ from the current password", field="new_password")

        self._users.update_password_hash(user_id, generate_password_hash(new_password))
        logger.info("Password changed: user_id=%s", user_id)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository, machines: MachineRepository):
        self._users = users
        self._machines = machines

    def list_users(self) -> Sequence[UserSummary]:
        return self._users.list_all()

    def create_user(
        self,
        *,
        name: str,
        username: str,
        password: str,
        role: Union[Role, str],
        machine_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> int:
        name = sanitize_text(require_non_empty(name, "name"), 255)
        username = require_non_empty(username, "username")
        if not _USERNAME.match(username):
            raise ValidationError(
                "Username must be 3-100 characters: letters, numbers and underscores",
                field="username",
            )
        require_strong_password(password)
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError("Role must be admin or worker", field="role") from None

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists", field="username")

        if machine_id is not None and not self._machines.get_by_id(int(machine_id)):
            raise ValidationError("Machine not found", field="machine_id")

        user_id = self._users.create_user(
            name=name,
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            machine_id=int(machine_id) if machine_id is not None else None,
            department=sanitize_text(department, 100) or None,
        )
        logger.info("User created: id=%s username=%s role=%s", user_id, username, role.value)
        return user_id

    def delete_user(self, *, current_role: Optional[Role], user_id: int) -> None:
        """Remove an account. Jobs of a deleted worker stay, with no worker attached."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Insufficient permissions")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")

        if not self._users.delete_by_id(user_id):
            raise NotFoundError("User not found")
        logger.info("User deleted: id=%s username=%s", user_id, user.username)
