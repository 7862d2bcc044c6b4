from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import JobUnit, MachineType, RateUnit


@dataclass(frozen=True)
class JobType:
    """A kind of print job offered on one machine type, billed per ``unit``."""

    job_type_id: int
    machine_type: MachineType
    name: str
    unit: JobUnit


@dataclass(frozen=True)
class Pricing:
    pricing_id: int
    job_type_id: int
    rate: Decimal
    rate_unit: RateUnit
    active: bool
    created_at: Optional[datetime] = None
    job_type_name: Optional[str] = None
    machine_type: Optional[MachineType] = None
    unit: Optional[JobUnit] = None
