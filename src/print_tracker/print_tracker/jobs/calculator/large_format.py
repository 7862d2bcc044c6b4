from __future__ import annotations

from typing import Any

from ...common.validators import require_at_most, require_positive_decimal
from ...core.constants import CM_PER_METER, MAX_STORED_DECIMAL
from ...core.enums import MachineType
from ...core.exceptions import InvalidDimensions, InvalidRate
from ...common.money import measure, money
from .base import AmountCalculator, CalculationResult, Dimensions


class LargeFormatCalculator(AmountCalculator):
    """Area rule: (width_cm / 100) * (height_cm / 100) * rate per square meter."""

    machine_type = MachineType.LARGE_FORMAT

    def calculate(self, dimensions: Dimensions, rate: Any) -> CalculationResult:
        if dimensions.width_cm is None or dimensions.height_cm is None:
            raise InvalidDimensions(
                "Large format jobs require width_cm and height_cm",
                field="dimensions",
                details=dimensions.as_dict(),
            )
        width_cm = require_positive_decimal(dimensions.width_cm, "width_cm", error_cls=InvalidDimensions)
        height_cm = require_positive_decimal(dimensions.height_cm, "height_cm", error_cls=InvalidDimensions)
        rate_d = require_positive_decimal(rate, "rate", error_cls=InvalidRate)
        require_at_most(width_cm, MAX_STORED_DECIMAL, "width_cm", error_cls=InvalidDimensions)
        require_at_most(height_cm, MAX_STORED_DECIMAL, "height_cm", error_cls=InvalidDimensions)
        require_at_most(rate_d, MAX_STORED_DECIMAL, "rate", error_cls=InvalidRate)

        width_m = width_cm / CM_PER_METER
        height_m = height_cm / CM_PER_METER
        area = width_m * height_m
        amount = require_at_most(area * rate_d, MAX_STORED_DECIMAL, "amount", error_cls=InvalidDimensions)

        return CalculationResult(
            amount=money(amount),
            rate=money(rate_d),
            width_m=measure(width_m),
            height_m=measure(height_m),
            area=measure(area),
        )
