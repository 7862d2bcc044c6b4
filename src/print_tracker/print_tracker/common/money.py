from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ..core.constants import MEASURE_QUANT, MONEY_QUANT
from .validators import to_decimal


def money(value: Decimal) -> Decimal:
    """Round half-up to cents."""
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def measure(value: Decimal) -> Decimal:
    return value.quantize(MEASURE_QUANT, rounding=ROUND_HALF_UP)


def money_or_zero(value: Any) -> Decimal:
    """Database aggregate (Decimal, float, text or NULL) to a cent-rounded Decimal."""
    d = to_decimal(value)
    return money(d if d is not None else Decimal("0"))
