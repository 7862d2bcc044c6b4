from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import as_datetime
from ..common.money import money_or_zero
from ..core.enums import JobUnit, MachineType, RateUnit
from ..database.connection import DataAccess
from .model import JobType, Pricing
from .repository import PricingRepository

_SELECT_PRICING = """
    SELECT p.id, p.job_type_id, p.rate, p.rate_unit, p.active, p.created_at,
           jt.name AS job_type_name, jt.machine_type, jt.unit
    FROM pricing p
    INNER JOIN job_types jt ON p.job_type_id = jt.id
"""


def _row_to_pricing(row: dict) -> Pricing:
    return Pricing(
        pricing_id=int(row["id"]),
        job_type_id=int(row["job_type_id"]),
        rate=money_or_zero(row["rate"]),
        rate_unit=RateUnit(row["rate_unit"]),
        active=bool(row["active"]),
        created_at=as_datetime(row.get("created_at")),
        job_type_name=row.get("job_type_name"),
        machine_type=MachineType(row["machine_type"]) if row.get("machine_type") else None,
        unit=JobUnit(row["unit"]) if row.get("unit") else None,
    )


class SQLPricingRepository(PricingRepository):
    def __init__(self, data: DataAccess):
        self._data = data

    def active_rates(self, job_type_id: int) -> Sequence[Pricing]:
        rows = self._data.query(
            _SELECT_PRICING + " WHERE p.job_type_id = %s AND p.active = 1 ORDER BY p.id",
            (job_type_id,),
        )
        return [_row_to_pricing(r) for r in rows]

    def get_job_type(self, job_type_id: int) -> Optional[JobType]:
        rows = self._data.query(
            "SELECT id, machine_type, name, unit FROM job_types WHERE id = %s",
            (job_type_id,),
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

    def get_by_id(self, pricing_id: int) -> Optional[Pricing]:
        rows = self._data.query(_SELECT_PRICING + " WHERE p.id = %s", (pricing_id,))
        return _row_to_pricing(rows[0]) if rows else None

    def list_all(self) -> Sequence[Pricing]:
        rows = self._data.query(_SELECT_PRICING + " ORDER BY jt.machine_type, jt.name, p.id")
        return [_row_to_pricing(r) for r in rows]

    def list_for_job_type(self, job_type_id: int) -> Sequence[Pricing]:
        rows = self._data.query(_SELECT_PRICING + " WHERE p.job_type_id = %s ORDER BY p.id", (job_type_id,))
        return [_row_to_pricing(r) for r in rows]

    def create(self, *, job_type_id: int, rate: Decimal, rate_unit: RateUnit, active: bool) -> int:
        def _run(session) -> int:
            if active:
                session.execute(
                    "UPDATE pricing SET active = 0 WHERE job_type_id = %s AND active = 1",
                    (job_type_id,),
                )
            res = session.execute(
                "INSERT INTO pricing (job_type_id, rate, rate_unit, active) VALUES (%s, %s, %s, %s)",
                (job_type_id, rate, rate_unit.value, 1 if active else 0),
            )
            return int(res.lastrowid)

        return self._data.transaction(_run)

    def update(self, pricing_id: int, *, rate: Optional[Decimal] = None, active: Optional[bool] = None) -> bool:
        updates: list[str] = []
        params: list = []
        if rate is not None:
            updates.append("rate = %s")
            params.append(rate)
        if active is not None:
            updates.append("active = %s")
            params.append(1 if active else 0)
        if not updates:
            return False

        def _run(session) -> bool:
            rows = session.query("SELECT job_type_id FROM pricing WHERE id = %s", (pricing_id,))
            if not rows:
                return False
            if active:
                session.execute(
                    "UPDATE pricing SET active = 0 WHERE job_type_id = %s AND active = 1 AND id <> %s",
                    (rows[0]["job_type_id"], pricing_id),
                )
            session.execute(f"UPDATE pricing SET {', '.join(updates)} WHERE id = %s", (*params, pricing_id))
            return True

        return self._data.transaction(_run)
