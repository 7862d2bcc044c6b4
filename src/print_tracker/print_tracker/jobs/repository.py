from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..pricing.model import JobType
from .model import AvailableJobType, JobTypeTotal, WorkerJobRow

SORT_COLUMNS = {
    "created_at": "j.created_at",
    "amount": "j.amount",
    "job_type": "jt.name",
    "description": "j.description",
}


class JobRepository(Protocol):
    def find_compatible_job_type(self, *, job_type_id: int, machine_id: int) -> Optional[JobType]:
        """The job type if it belongs to the type of machine ``machine_id``, else None."""
        raise NotImplementedError

    def insert(
        self,
        *,
        worker_id: int,
        machine_id: int,
        job_type_id: int,
        description: str,
        width_cm: Optional[Decimal],
        height_cm: Optional[Decimal],
        quantity: Optional[int],
        rate: Decimal,
        amount: Decimal,
    ) -> int:
        raise NotImplementedError

    def list_for_worker(
        self,
        *,
        worker_id: int,
        start: Optional[str],
        end: Optional[str],
        limit: int,
        offset: int,
        sort: str = "created_at",
        descending: bool = True,
    ) -> Sequence[WorkerJobRow]:
        raise NotImplementedError

    def count_for_worker(self, *, worker_id: int, start: Optional[str], end: Optional[str]) -> int:
        raise NotImplementedError

    def worker_totals(self, *, worker_id: int, start: str, end: str) -> tuple[int, Decimal]:
        raise NotImplementedError

    def worker_totals_by_type(self, *, worker_id: int, start: str, end: str) -> Sequence[JobTypeTotal]:
        raise NotImplementedError

    def job_types_for_machine(self, machine_id: int) -> Sequence[AvailableJobType]:
        raise NotImplementedError
