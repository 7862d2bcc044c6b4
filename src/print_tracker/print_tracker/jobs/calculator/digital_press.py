from __future__ import annotations

from decimal import Decimal
from typing import Any

from ...common.validators import require_at_most, require_positive_decimal, require_positive_int
from ...core.constants import MAX_STORED_DECIMAL, MAX_STORED_INT
from ...core.enums import MachineType
from ...core.exceptions import InvalidQuantity, InvalidRate
from ...common.money import money
from .base import AmountCalculator, CalculationResult, Dimensions


class DigitalPressCalculator(AmountCalculator):
    """Piece rule: quantity * rate per piece."""

    machine_type = MachineType.DIGITAL_PRESS

    def calculate(self, dimensions: Dimensions, rate: Any) -> CalculationResult:
        if dimensions.quantity is None:
            raise InvalidQuantity("Digital press jobs require quantity", field="quantity", details=dimensions.as_dict())
        quantity = require_positive_int(dimensions.quantity, "quantity", error_cls=InvalidQuantity)
        rate_d = require_positive_decimal(rate, "rate", error_cls=InvalidRate)
        require_at_most(quantity, MAX_STORED_INT, "quantity", error_cls=InvalidQuantity)
        require_at_most(rate_d, MAX_STORED_DECIMAL, "rate", error_cls=InvalidRate)

        amount = require_at_most(Decimal(quantity) * rate_d, MAX_STORED_DECIMAL, "amount", error_cls=InvalidQuantity)

        return CalculationResult(
            amount=money(amount),
            rate=money(rate_d),
            quantity=quantity,
        )
