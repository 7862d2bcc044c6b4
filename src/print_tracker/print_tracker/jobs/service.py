from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import day_bounds, today_local
from ..common.sanitize import sanitize_text
from ..common.validators import require_positive_decimal, to_decimal
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_DESCRIPTION_LENGTH, MAX_PAGE_LIMIT
from ..core.enums import MachineType
from ..core.exceptions import (
    IncompatibleJobType,
    InvalidRate,
    MissingFields,
    NoMachineAssigned,
    ValidationError,
)
from ..core.logging_config import get_logger
from .calculator.base import Dimensions
from .calculator.engine import CalculationEngine
from .model import AvailableJobType, DailyTotal, JobCreated, JobPage
from .repository import SORT_COLUMNS, JobRepository

logger = get_logger(__name__)


class JobService:
    """Use case: workers register print jobs and read back their own work."""

    def __init__(self, jobs: JobRepository, *, engine: Optional[CalculationEngine] = None):
        self._jobs = jobs
        self._engine = engine or CalculationEngine()

    def create_job(
        self,
        *,
        worker_id: int,
        machine_id: Optional[int],
        job_type_id: Any,
        description: Optional[str],
        dimensions: Optional[Mapping[str, Any]],
        manual_rate: Any,
    ) -> JobCreated:
        """Validate, price and persist one job.

        Checks run in a fixed order so the first failing rule decides the error:
        machine assignment, required fields, rate, job type compatibility, then
        the dimension rules of the machine type.
        """
        if not machine_id:
            raise NoMachineAssigned("Worker has no assigned machine", {"worker_id": worker_id})

        clean_description = sanitize_text(description, MAX_DESCRIPTION_LENGTH)
        if job_type_id in (None, "") or not clean_description:
            raise MissingFields("Job type and description are required")
        try:
            job_type_id = int(job_type_id)
        except (TypeError, ValueError):
            raise MissingFields("Job type and description are required", field="job_type_id") from None

        rate = require_positive_decimal(manual_rate, "rate", error_cls=InvalidRate)

        job_type = self._jobs.find_compatible_job_type(job_type_id=job_type_id, machine_id=int(machine_id))
        if not job_type:
            raise IncompatibleJobType(
                "Invalid job type for assigned machine",
                {"job_type_id": job_type_id, "machine_id": machine_id},
            )

        dims = Dimensions.from_mapping(dimensions)
        result = self._engine.compute_amount(job_type.machine_type, dims, rate)

        if job_type.machine_type == MachineType.LARGE_FORMAT:
            width_cm, height_cm, quantity = to_decimal(dims.width_cm), to_decimal(dims.height_cm), None
        else:
            width_cm, height_cm, quantity = None, None, result.quantity

        job_id = self._jobs.insert(
            worker_id=int(worker_id),
            machine_id=int(machine_id),
            job_type_id=job_type.job_type_id,
            description=clean_description,
            width_cm=width_cm,
            height_cm=height_cm,
            quantity=quantity,
            rate=result.rate,
            amount=result.amount,
        )
        logger.info(
            "Job created: id=%s worker_id=%s machine_id=%s job_type_id=%s amount=%s",
            job_id,
            worker_id,
            machine_id,
            job_type.job_type_id,
            result.amount,
        )
        return JobCreated(job_id=job_id, amount=result.amount)

    def job_types_for_machine(self, machine_id: Optional[int]) -> Sequence[AvailableJobType]:
        if not machine_id:
            raise NoMachineAssigned("Worker has no assigned machine")
        return self._jobs.job_types_for_machine(int(machine_id))

    def list_worker_jobs(
        self,
        *,
        worker_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
        sort: str = "created_at",
        order: str = "desc",
    ) -> JobPage:
        if sort not in SORT_COLUMNS:
            raise ValidationError(f"Invalid sort field: {sort}", field="sort")
        if str(order).lower() not in ("asc", "desc"):
            raise ValidationError(f"Invalid sort order: {order}", field="order")
        if limit < 1 or offset < 0:
            raise ValidationError("limit must be positive and offset non-negative")
        limit = min(int(limit), MAX_PAGE_LIMIT)

        start_s = end_s = None
        if start and end:
            start_s = day_bounds(start)[0]
            end_s = day_bounds(end)[1]

        jobs = self._jobs.list_for_worker(
            worker_id=worker_id,
            start=start_s,
            end=end_s,
            limit=limit,
            offset=int(offset),
            sort=sort,
            descending=str(order).lower() == "desc",
        )
        total = self._jobs.count_for_worker(worker_id=worker_id, start=start_s, end=end_s)
        return JobPage(jobs=list(jobs), total=total, limit=limit, offset=int(offset))

    def worker_daily_total(self, *, worker_id: int, day: Optional[date] = None) -> DailyTotal:
        day = day or today_local()
        start, end = day_bounds(day)
        count, total = self._jobs.worker_totals(worker_id=worker_id, start=start, end=end)
        by_type = self._jobs.worker_totals_by_type(worker_id=worker_id, start=start, end=end)
        return DailyTotal(day=day, job_count=count, total_amount=total, by_job_type=list(by_type))
