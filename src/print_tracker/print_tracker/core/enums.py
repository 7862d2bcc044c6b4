from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access control."""

    ADMIN = "admin"
    WORKER = "worker"


class MachineType(str, Enum):
    """Machine categories; each has its own amount rule."""

    LARGE_FORMAT = "large_format"
    DIGITAL_PRESS = "digital_press"


class JobUnit(str, Enum):
    SQM = "sqm"
    PIECE = "piece"


class RateUnit(str, Enum):
    PER_SQM = "per_sqm"
    PER_PIECE = "per_piece"


class MachineStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class LimitCategory(str, Enum):
    """Endpoint categories for request throttling."""

    LOGIN = "login"
    API = "api"
    UPLOAD = "upload"
    STRICT = "strict"


RATE_UNIT_FOR_JOB_UNIT = {
    JobUnit.SQM: RateUnit.PER_SQM,
    JobUnit.PIECE: RateUnit.PER_PIECE,
}
