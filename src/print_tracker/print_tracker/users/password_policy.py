from __future__ import annotations

import re
from typing import List, Optional

from ..core.exceptions import ValidationError

MIN_LENGTH = 8
MAX_LENGTH = 128

COMMON_PASSWORDS = frozenset(
    {
        "password",
        "password123",
        "12345678",
        "qwerty",
        "abc123",
        "admin",
        "admin123",
        "letmein",
        "welcome",
        "monkey",
    }
)

_SPECIAL = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


def password_errors(password: Optional[str]) -> List[str]:
    """Every rule the password breaks, in a stable order; empty when it is acceptable."""
    if not password or not isinstance(password, str):
        return ["Password is required"]

    errors: List[str] = []
    if len(password) < MIN_LENGTH:
        errors.append(f"Password must be at least {MIN_LENGTH} characters long")
    if len(password) > MAX_LENGTH:
        errors.append(f"Password must not exceed {MAX_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        errors.append("Password must contain at least one number")
    if not _SPECIAL.search(password):
        errors.append("Password must contain at least one special character")
    if password.lower() in COMMON_PASSWORDS:
        errors.append("Password is too common. Please choose a stronger password")
    return errors


def require_strong_password(password: Optional[str], field_name: str = "password") -> str:
    errors = password_errors(password)
    if errors:
        raise ValidationError(errors[0], field=field_name, details={"errors": errors})
    return password
