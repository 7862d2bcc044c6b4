from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from ..core.enums import JobUnit, MachineType


@dataclass(frozen=True)
class DailySummary:
    day: date
    total_jobs: int
    total_revenue: Decimal
    active_workers: int
    active_machines: int


@dataclass(frozen=True)
class MachineSummaryRow:
    machine_id: int
    machine_name: str
    machine_type: MachineType
    job_count: int
    total_revenue: Decimal


@dataclass(frozen=True)
class WorkerSummaryRow:
    worker_id: int
    worker_name: str
    machine_name: Optional[str]
    job_count: int
    total_revenue: Decimal


@dataclass(frozen=True)
class JobTypeSummaryRow:
    job_type_id: int
    job_type_name: str
    machine_type: MachineType
    unit: JobUnit
    job_count: int
    total_revenue: Decimal
    average_revenue: Decimal


@dataclass(frozen=True)
class DetailedJobRow:
    """One job of the day; worker_name is None when the worker account was deleted."""

    job_id: int
    description: str
    worker_name: Optional[str]
    machine_name: str
    job_type_name: str
    width_cm: Optional[Decimal]
    height_cm: Optional[Decimal]
    quantity: Optional[int]
    rate: Decimal
    amount: Decimal
    created_at: Optional[datetime]


@dataclass(frozen=True)
class DailyReport:
    day: date
    summary: DailySummary
    machines: List[MachineSummaryRow]
    workers: List[WorkerSummaryRow]
    job_types: List[JobTypeSummaryRow]
    jobs: List[DetailedJobRow]
