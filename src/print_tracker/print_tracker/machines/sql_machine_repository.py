from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import as_datetime
from ..core.enums import MachineStatus, MachineType
from ..database.connection import DataAccess
from .model import Machine
from .repository import MachineRepository


def _row_to_machine(row: dict) -> Machine:
    return Machine(
        machine_id=int(row["id"]),
        name=row["name"],
        machine_type=MachineType(row["type"]),
        status=MachineStatus(row.get("status") or MachineStatus.ACTIVE.value),
        created_at=as_datetime(row.get("created_at")),
    )


class SQLMachineRepository(MachineRepository):
    def __init__(self, data: DataAccess):
        self._data = data

    def get_by_id(self, machine_id: int) -> Optional[Machine]:
        rows = self._data.query("SELECT id, name, type, status, created_at FROM machines WHERE id = %s", (machine_id,))
        return _row_to_machine(rows[0]) if rows else None

    def list_all(self) -> Sequence[Machine]:
        rows = self._data.query("SELECT id, name, type, status, created_at FROM machines ORDER BY type, name")
        return [_row_to_machine(r) for r in rows]

    def create(self, *, name: str, machine_type: MachineType, status: MachineStatus) -> int:
        res = self._data.execute(
            "INSERT INTO machines (name, type, status) VALUES (%s, %s, %s)",
            (name, machine_type.value, status.value),
        )
        return int(res.lastrowid)
