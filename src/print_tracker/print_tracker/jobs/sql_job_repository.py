from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import as_datetime
from ..common.money import money_or_zero
from ..common.validators import to_decimal
from ..core.enums import JobUnit, MachineType, RateUnit
from ..database.connection import DataAccess
from ..pricing.model import JobType
from .model import AvailableJobType, JobTypeTotal, WorkerJobRow
from .repository import SORT_COLUMNS, JobRepository


def _range_clause(start: Optional[str], end: Optional[str]) -> tuple[str, tuple]:
    if start and end:
        return " AND j.created_at BETWEEN %s AND %s", (start, end)
    return "", ()


class SQLJobRepository(JobRepository):
    def __init__(self, data: DataAccess):
        self._data = data

    def find_compatible_job_type(self, *, job_type_id: int, machine_id: int) -> Optional[JobType]:
        rows = self._data.query(
            """
            SELECT jt.id, jt.name, jt.unit, m.type AS machine_type
            FROM job_types jt
            INNER JOIN machines m ON jt.machine_type = m.type
            WHERE jt.id = %s AND m.id = %s
            """,
            (job_type_id, machine_id),
        )
        if not rows:
            return None
        r = rows[0]
        return JobType(
            job_type_id=int(r["id"]),
            machine_type=MachineType(r["machine_type"]),
            name=r["name"],
            unit=JobUnit(r["unit"]),
        )

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
        res = self._data.execute(
            """
            INSERT INTO jobs
                (worker_id, machine_id, job_type_id, description, width_cm, height_cm, quantity, rate, amount)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            (worker_id, machine_id, job_type_id, description, width_cm, height_cm, quantity, rate, amount),
        )
        return int(res.lastrowid)

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
        order_col = SORT_COLUMNS.get(sort, SORT_COLUMNS["created_at"])
        direction = "DESC" if descending else "ASC"
        where, params = _range_clause(start, end)
        rows = self._data.query(
            f"""
            SELECT j.id, j.description, jt.name AS job_type_name, jt.unit, m.name AS machine_name,
                   j.width_cm, j.height_cm, j.quantity, j.rate, j.amount, j.created_at
            FROM jobs j
            INNER JOIN job_types jt ON j.job_type_id = jt.id
            INNER JOIN machines m ON j.machine_id = m.id
            WHERE j.worker_id = %s{where}
            ORDER BY {order_col} {direction}, j.id {direction}
            LIMIT %s OFFSET %s
            """,
            (worker_id, *params, int(limit), int(offset)),
        )
        return [
            WorkerJobRow(
                job_id=int(r["id"]),
                description=r["description"],
                job_type_name=r["job_type_name"],
                unit=JobUnit(r["unit"]),
                machine_name=r["machine_name"],
                width_cm=to_decimal(r.get("width_cm")),
                height_cm=to_decimal(r.get("height_cm")),
                quantity=int(r["quantity"]) if r.get("quantity") is not None else None,
                rate=money_or_zero(r["rate"]),
                amount=money_or_zero(r["amount"]),
                created_at=as_datetime(r.get("created_at")),
            )
            for r in rows
        ]

    def count_for_worker(self, *, worker_id: int, start: Optional[str], end: Optional[str]) -> int:
        where, params = _range_clause(start, end)
        rows = self._data.query(
            f"SELECT COUNT(*) AS total FROM jobs j WHERE j.worker_id = %s{where}",
            (worker_id, *params),
        )
        return int(rows[0]["total"]) if rows else 0

    def worker_totals(self, *, worker_id: int, start: str, end: str) -> tuple[int, Decimal]:
        rows = self._data.query(
            """
            SELECT COUNT(id) AS job_count, COALESCE(SUM(amount), 0) AS total_amount
            FROM jobs
            WHERE worker_id = %s AND created_at BETWEEN %s AND %s
            """,
            (worker_id, start, end),
        )
        r = rows[0] if rows else {}
        return int(r.get("job_count") or 0), money_or_zero(r.get("total_amount"))

    def worker_totals_by_type(self, *, worker_id: int, start: str, end: str) -> Sequence[JobTypeTotal]:
        rows = self._data.query(
            """
            SELECT jt.name AS job_type_name, COUNT(j.id) AS job_count, COALESCE(SUM(j.amount), 0) AS total
            FROM jobs j
            INNER JOIN job_types jt ON j.job_type_id = jt.id
            WHERE j.worker_id = %s AND j.created_at BETWEEN %s AND %s
            GROUP BY jt.name
            ORDER BY total DESC, jt.name
            """,
            (worker_id, start, end),
        )
        return [
            JobTypeTotal(
                job_type_name=r["job_type_name"],
                count=int(r["job_count"]),
                total=money_or_zero(r["total"]),
            )
            for r in rows
        ]

    def job_types_for_machine(self, machine_id: int) -> Sequence[AvailableJobType]:
        rows = self._data.query(
            """
            SELECT jt.id, jt.name, jt.unit, p.rate, p.rate_unit
            FROM job_types jt
            INNER JOIN machines m ON jt.machine_type = m.type
            INNER JOIN pricing p ON jt.id = p.job_type_id AND p.active = 1
            WHERE m.id = %s
            ORDER BY jt.name, p.id
            """,
            (machine_id,),
        )
        out: list[AvailableJobType] = []
        seen: set[int] = set()
        for r in rows:
            if int(r["id"]) in seen:
                continue
            seen.add(int(r["id"]))
            out.append(
                AvailableJobType(
                    job_type_id=int(r["id"]),
                    name=r["name"],
                    unit=JobUnit(r["unit"]),
                    rate=money_or_zero(r["rate"]),
                    rate_unit=RateUnit(r["rate_unit"]),
                )
            )
        return out
