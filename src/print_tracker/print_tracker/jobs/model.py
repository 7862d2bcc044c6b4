from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from ..core.enums import JobUnit, RateUnit


@dataclass(frozen=True)
class JobCreated:
    job_id: int
    amount: Decimal


@dataclass(frozen=True)
class WorkerJobRow:
    job_id: int
    description: str
    job_type_name: str
    unit: JobUnit
    machine_name: str
    width_cm: Optional[Decimal]
    height_cm: Optional[Decimal]
    quantity: Optional[int]
    rate: Decimal
    amount: Decimal
    created_at: Optional[datetime]


@dataclass(frozen=True)
class JobPage:
    jobs: List[WorkerJobRow]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.jobs) < self.total


@dataclass(frozen=True)
class JobTypeTotal:
    job_type_name: str
    count: int
    total: Decimal


@dataclass(frozen=True)
class DailyTotal:
    day: date
    job_count: int
    total_amount: Decimal
    by_job_type: List[JobTypeTotal] = field(default_factory=list)


@dataclass(frozen=True)
class AvailableJobType:
    """A job type offered on a worker's machine, with its current active rate."""

    job_type_id: int
    name: str
    unit: JobUnit
    rate: Decimal
    rate_unit: RateUnit
