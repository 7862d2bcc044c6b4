from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import MachineStatus, MachineType


@dataclass(frozen=True)
class Machine:
    machine_id: int
    name: str
    machine_type: MachineType
    status: MachineStatus = MachineStatus.ACTIVE
    created_at: Optional[datetime] = None
