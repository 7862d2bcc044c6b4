from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)", field="date") from None


def day_bounds(day: date) -> tuple[str, str]:
    """Inclusive [00:00:00, 23:59:59] bounds of a calendar day as SQL datetime strings."""
    iso = day.strftime("%Y-%m-%d")
    return f"{iso} 00:00:00", f"{iso} 23:59:59"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def as_datetime(value) -> Optional[datetime]:
    """Normalize a driver value (datetime from MySQL, text from SQLite) to datetime."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else None
