from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import RateUnit
from .model import JobType, Pricing


class PricingRepository(Protocol):
    """Pricing and job-type persistence used by PricingService."""

    def active_rates(self, job_type_id: int) -> Sequence[Pricing]:
        """Active rows for a job type, lowest id first."""
        raise NotImplementedError

    def get_job_type(self, job_type_id: int) -> Optional[JobType]:
        raise NotImplementedError

    def get_by_id(self, pricing_id: int) -> Optional[Pricing]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Pricing]:
        raise NotImplementedError

    def list_for_job_type(self, job_type_id: int) -> Sequence[Pricing]:
        raise NotImplementedError

    def create(self, *, job_type_id: int, rate: Decimal, rate_unit: RateUnit, active: bool) -> int:
        raise NotImplementedError

    def update(self, pricing_id: int, *, rate: Optional[Decimal] = None, active: Optional[bool] = None) -> bool:
        raise NotImplementedError
