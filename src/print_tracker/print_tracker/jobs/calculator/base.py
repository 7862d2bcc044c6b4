from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from ...core.enums import MachineType


@dataclass(frozen=True)
class Dimensions:
    """Raw measurements as submitted. Only the fields of the machine type are read."""

    width_cm: Any = None
    height_cm: Any = None
    quantity: Any = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "Dimensions":
        data = data or {}
        return cls(
            width_cm=data.get("width_cm"),
            height_cm=data.get("height_cm"),
            quantity=data.get("quantity"),
        )

    def as_dict(self) -> dict:
        return {"width_cm": self.width_cm, "height_cm": self.height_cm, "quantity": self.quantity}


@dataclass(frozen=True)
class CalculationResult:
    amount: Decimal
    rate: Decimal
    width_m: Optional[Decimal] = None
    height_m: Optional[Decimal] = None
    area: Optional[Decimal] = None
    quantity: Optional[int] = None


class AmountCalculator(ABC):
    """Calculator interface (Strategy Pattern, one per machine type)."""

    machine_type: MachineType

    @abstractmethod
    def calculate(self, dimensions: Dimensions, rate: Any) -> CalculationResult:
        raise NotImplementedError
