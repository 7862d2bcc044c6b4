from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal
from typing import Callable, List, TypeVar, Union

from ..common.datetime_utils import as_datetime, day_bounds, parse_iso_date
from ..common.money import money, money_or_zero
from ..common.validators import to_decimal
from ..core.enums import JobUnit, MachineType
from ..core.exceptions import DataAccessError
from ..core.logging_config import get_logger
from .model import (
    DailyReport,
    DailySummary,
    DetailedJobRow,
    JobTypeSummaryRow,
    MachineSummaryRow,
    WorkerSummaryRow,
)
from .repository import ReportRepository

logger = get_logger(__name__)

T = TypeVar("T")
DayLike = Union[date, str]


def _coerce_day(value: DayLike) -> date:
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def _by_revenue(rows: List[T]) -> List[T]:
    # Stable: ties keep the repository order.
    return sorted(rows, key=lambda r: r.total_revenue, reverse=True)


class ReportService:
    """Daily revenue views for admins.

    Each view is an independent read over jobs created within the calendar day.
    Money is returned as Decimal rounded to cents.
    """

    def __init__(self, reports: ReportRepository, *, max_workers: int = 5):
        self._reports = reports
        self._max_workers = max(1, int(max_workers))

    def _run(self, name: str, day: date, fn: Callable[[str, str], T]) -> T:
        start, end = day_bounds(day)
        try:
            return fn(start, end)
        except DataAccessError as exc:
            logger.error("Failed to get %s for %s: %s", name, day.isoformat(), exc)
            raise

    def get_daily_summary(self, day: DayLike) -> DailySummary:
        d = _coerce_day(day)
        row = self._run("daily summary", d, lambda s, e: self._reports.daily_summary(start=s, end=e)) or {}
        return DailySummary(
            day=d,
            total_jobs=int(row.get("total_jobs") or 0),
            total_revenue=money_or_zero(row.get("total_revenue")),
            active_workers=int(row.get("active_workers") or 0),
            active_machines=int(row.get("active_machines") or 0),
        )

    def get_machine_summary(self, day: DayLike) -> List[MachineSummaryRow]:
        d = _coerce_day(day)
        rows = self._run("machine summary", d, lambda s, e: self._reports.machine_summary(start=s, end=e))
        return _by_revenue(
            [
                MachineSummaryRow(
                    machine_id=int(r["machine_id"]),
                    machine_name=r["machine_name"],
                    machine_type=MachineType(r["machine_type"]),
                    job_count=int(r.get("job_count") or 0),
                    total_revenue=money_or_zero(r.get("total_revenue")),
                )
                for r in rows
            ]
        )

    def get_worker_summary(self, day: DayLike) -> List[WorkerSummaryRow]:
        d = _coerce_day(day)
        rows = self._run("worker summary", d, lambda s, e: self._reports.worker_summary(start=s, end=e))
        return _by_revenue(
            [
                WorkerSummaryRow(
                    worker_id=int(r["worker_id"]),
                    worker_name=r["worker_name"],
                    machine_name=r.get("machine_name"),
                    job_count=int(r.get("job_count") or 0),
                    total_revenue=money_or_zero(r.get("total_revenue")),
                )
                for r in rows
            ]
        )

    def get_job_type_summary(self, day: DayLike) -> List[JobTypeSummaryRow]:
        d = _coerce_day(day)
        rows = self._run("job type summary", d, lambda s, e: self._reports.job_type_summary(start=s, end=e))
        out: List[JobTypeSummaryRow] = []
        for r in rows:
            count = int(r.get("job_count") or 0)
            total = money_or_zero(r.get("total_revenue"))
            average = money(total / count) if count > 0 else money(Decimal("0"))
            out.append(
                JobTypeSummaryRow(
                    job_type_id=int(r["job_type_id"]),
                    job_type_name=r["job_type_name"],
                    machine_type=MachineType(r["machine_type"]),
                    unit=JobUnit(r["unit"]),
                    job_count=count,
                    total_revenue=total,
                    average_revenue=average,
                )
            )
        return _by_revenue(out)

    def get_detailed_jobs(self, day: DayLike) -> List[DetailedJobRow]:
        d = _coerce_day(day)
        rows = self._run("detailed jobs", d, lambda s, e: self._reports.detailed_jobs(start=s, end=e))
        return [
            DetailedJobRow(
                job_id=int(r["job_id"]),
                description=r["description"],
                worker_name=r.get("worker_name"),
                machine_name=r["machine_name"],
                job_type_name=r["job_type_name"],
                width_cm=to_decimal(r.get("width_cm")),
                height_cm=to_decimal(r.get("height_cm")),
                quantity=int(r["quantity"]) if r.get("quantity") is not None else None,
                rate=money_or_zero(r.get("rate")),
                amount=money_or_zero(r.get("amount")),
                created_at=as_datetime(r.get("created_at")),
            )
            for r in rows
        ]

    def build_daily_report(self, day: DayLike) -> DailyReport:
        """Run the five views in parallel; each read borrows its own connection."""
        d = _coerce_day(day)
        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="report") as pool:
            summary = pool.submit(self.get_daily_summary, d)
            machines = pool.submit(self.get_machine_summary, d)
            workers = pool.submit(self.get_worker_summary, d)
            job_types = pool.submit(self.get_job_type_summary, d)
            jobs = pool.submit(self.get_detailed_jobs, d)

            report = DailyReport(
                day=d,
                summary=summary.result(),
                machines=machines.result(),
                workers=workers.result(),
                job_types=job_types.result(),
                jobs=jobs.result(),
            )

        logger.info(
            "Daily report built for %s: jobs=%s revenue=%s",
            d.isoformat(),
            report.summary.total_jobs,
            report.summary.total_revenue,
        )
        return report
