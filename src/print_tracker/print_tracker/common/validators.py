from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Type

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return str(value).strip()


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a user/database number to Decimal, or None if it is not a finite number.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1"), not its binary expansion.
    Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite():
        return None
    return d


def require_positive_decimal(
    value: Any,
    field_name: str,
    *,
    error_cls: Type[ValidationError] = ValidationError,
) -> Decimal:
    d = to_decimal(value)
    if d is None or d <= 0:
        raise error_cls(
            f"Invalid {field_name}: {field_name} must be a positive number",
            field=field_name,
            details={field_name: value},
        )
    return d


def require_positive_int(
    value: Any,
    field_name: str,
    *,
    error_cls: Type[ValidationError] = ValidationError,
) -> int:
    """Accept ints and integral numeric strings; reject 1.5, "1.5", True, 0, -3."""
    d = to_decimal(value)
    fractional_text = isinstance(value, str) and "." in value
    if d is None or d <= 0 or d != d.to_integral_value() or fractional_text:
        raise error_cls(
            f"Invalid {field_name}: {field_name} must be a positive integer",
            field=field_name,
            details={field_name: value},
        )
    return int(d)


def require_at_most(
    value: Any,
    limit: Any,
    field_name: str,
    *,
    error_cls: Type[ValidationError] = ValidationError,
) -> Any:
    if value > limit:
        raise error_cls(
            f"Invalid {field_name}: {field_name} must not exceed {limit}",
            field=field_name,
            details={field_name: str(value)},
        )
    return value


def parse_optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", field=field_name) from None


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
