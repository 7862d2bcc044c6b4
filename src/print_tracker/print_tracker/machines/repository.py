from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import MachineStatus, MachineType
from .model import Machine


class MachineRepository(Protocol):
    def get_by_id(self, machine_id: int) -> Optional[Machine]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Machine]:
        raise NotImplementedError

    def create(self, *, name: str, machine_type: MachineType, status: MachineStatus) -> int:
        raise NotImplementedError
