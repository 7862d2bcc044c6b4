from __future__ import annotations

from typing import Sequence, Union

from ..common.sanitize import sanitize_text
from ..core.enums import MachineStatus, MachineType
from ..core.exceptions import ValidationError
from ..core.logging_config import get_logger
from .model import Machine
from .repository import MachineRepository

logger = get_logger(__name__)

MAX_NAME_LENGTH = 255


class MachineService:
    """Use case: manage the shop's machines (admin)."""

    def __init__(self, machines: MachineRepository):
        self._machines = machines

    def list_machines(self) -> Sequence[Machine]:
        return self._machines.list_all()

    def create_machine(
        self,
        *,
        name: str,
        machine_type: Union[MachineType, str],
        status: Union[MachineStatus, str, None] = None,
    ) -> int:
        clean_name = sanitize_text(name)
        if not clean_name:
            raise ValidationError("Name is required", field="name")
        if len(clean_name) > MAX_NAME_LENGTH:
            raise ValidationError(f"Name must not exceed {MAX_NAME_LENGTH} characters", field="name")
        try:
            mtype = MachineType(machine_type)
        except ValueError:
            raise ValidationError("Type must be large_format or digital_press", field="type") from None
        try:
            mstatus = MachineStatus(status) if status else MachineStatus.ACTIVE
        except ValueError:
            raise ValidationError("Status must be active or inactive", field="status") from None

        machine_id = self._machines.create(name=clean_name, machine_type=mtype, status=mstatus)
        logger.info("Machine created: id=%s name=%s type=%s", machine_id, clean_name, mtype.value)
        return machine_id
