from __future__ import annotations

from dataclasses import dataclass, field
from decimal import DecimalException
from typing import Any, Dict, Mapping, Union

from ...core.enums import MachineType
from ...core.exceptions import UnsupportedMachineType, ValidationError
from ...core.logging_config import get_logger
from .base import AmountCalculator, CalculationResult, Dimensions
from .digital_press import DigitalPressCalculator
from .large_format import LargeFormatCalculator

logger = get_logger(__name__)


def _default_calculators() -> Dict[MachineType, AmountCalculator]:
    return {c.machine_type: c for c in (LargeFormatCalculator(), DigitalPressCalculator())}


@dataclass
class CalculationEngine:
    """Factory Pattern: pick the amount rule for a machine type and run it."""

    calculators: Dict[MachineType, AmountCalculator] = field(default_factory=_default_calculators)

    def for_machine_type(self, machine_type: Union[MachineType, str]) -> AmountCalculator:
        try:
            key = MachineType(machine_type)
        except ValueError:
            raise UnsupportedMachineType(
                f"Unknown machine type: {machine_type}",
                field="machine_type",
                details={"machine_type": str(machine_type)},
            ) from None
        calculator = self.calculators.get(key)
        if calculator is None:
            raise UnsupportedMachineType(f"Unknown machine type: {machine_type}", field="machine_type")
        return calculator

    def compute_amount(
        self,
        machine_type: Union[MachineType, str],
        dimensions: Union[Dimensions, Mapping[str, Any], None],
        rate: Any,
    ) -> CalculationResult:
        dims = dimensions if isinstance(dimensions, Dimensions) else Dimensions.from_mapping(dimensions)
        try:
            calculator = self.for_machine_type(machine_type)
            try:
                result = calculator.calculate(dims, rate)
            except DecimalException as exc:
                raise ValidationError(
                    "Dimensions or rate are out of range",
                    details={**dims.as_dict(), "rate": str(rate)},
                ) from exc
        except ValidationError as exc:
            logger.error(
                "Calculation failed: machine_type=%s dimensions=%s rate=%r error=%s",
                getattr(machine_type, "value", machine_type),
                dims.as_dict(),
                rate,
                exc,
            )
            raise
        logger.debug("Calculated %s amount=%s rate=%s", getattr(machine_type, "value", machine_type), result.amount, result.rate)
        return result


_default_engine = CalculationEngine()


def compute_amount(
    machine_type: Union[MachineType, str],
    dimensions: Union[Dimensions, Mapping[str, Any], None],
    rate: Any,
) -> CalculationResult:
    return _default_engine.compute_amount(machine_type, dimensions, rate)
