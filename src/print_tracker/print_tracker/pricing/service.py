from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence, Union

from ..common.money import money
from ..common.validators import require_positive_decimal
from ..core.enums import RATE_UNIT_FOR_JOB_UNIT, RateUnit
from ..core.exceptions import InvalidRate, NoActivePricing, NotFoundError, ValidationError
from ..core.logging_config import get_logger
from .model import Pricing
from .repository import PricingRepository

logger = get_logger(__name__)


class PricingService:
    """Use case: resolve the active rate of a job type; admin pricing maintenance."""

    def __init__(self, pricing: PricingRepository):
        self._pricing = pricing

    def get_active_rate(self, job_type_id: int) -> Decimal:
        rows = self._pricing.active_rates(int(job_type_id))
        if not rows:
            raise NoActivePricing(
                f"No active pricing found for job type ID: {job_type_id}",
                {"job_type_id": job_type_id},
            )
        if len(rows) > 1:
            logger.warning(
                "Job type %s has %s active pricing rows; using pricing id %s",
                job_type_id,
                len(rows),
                rows[0].pricing_id,
            )
        return rows[0].rate

    def list_pricing(self) -> Sequence[Pricing]:
        return self._pricing.list_all()

    def list_for_job_type(self, job_type_id: int) -> Sequence[Pricing]:
        return self._pricing.list_for_job_type(int(job_type_id))

    def create_pricing(
        self,
        *,
        job_type_id: int,
        rate: Any,
        rate_unit: Union[RateUnit, str, None] = None,
        active: bool = True,
    ) -> int:
        job_type = self._pricing.get_job_type(int(job_type_id))
        if not job_type:
            raise NotFoundError(f"Job type not found: {job_type_id}", {"job_type_id": job_type_id})

        rate_d = money(require_positive_decimal(rate, "rate", error_cls=InvalidRate))

        expected_unit = RATE_UNIT_FOR_JOB_UNIT[job_type.unit]
        if rate_unit in (None, ""):
            unit = expected_unit
        else:
            try:
                unit = RateUnit(rate_unit)
            except ValueError:
                raise ValidationError(f"Invalid rate unit: {rate_unit}", field="rate_unit") from None
            if unit != expected_unit:
                raise ValidationError(
                    f"Rate unit {unit.value} does not match job type unit {job_type.unit.value}",
                    field="rate_unit",
                )

        pricing_id = self._pricing.create(job_type_id=job_type.job_type_id, rate=rate_d, rate_unit=unit, active=bool(active))
        logger.info(
            "Pricing created: id=%s job_type_id=%s rate=%s rate_unit=%s active=%s",
            pricing_id,
            job_type.job_type_id,
            rate_d,
            unit.value,
            bool(active),
        )
        return pricing_id

    def update_pricing(self, pricing_id: int, *, rate: Any = None, active: Optional[bool] = None) -> None:
        if rate is None and active is None:
            raise ValidationError("No fields to update")

        if not self._pricing.get_by_id(int(pricing_id)):
            raise NotFoundError(f"Pricing not found: {pricing_id}", {"pricing_id": pricing_id})

        rate_d = money(require_positive_decimal(rate, "rate", error_cls=InvalidRate)) if rate is not None else None

        if not self._pricing.update(int(pricing_id), rate=rate_d, active=active):
            raise NotFoundError(f"Pricing not found: {pricing_id}", {"pricing_id": pricing_id})
        logger.info("Pricing updated: id=%s rate=%s active=%s", pricing_id, rate_d, active)

    def deactivate_pricing(self, pricing_id: int) -> None:
        self.update_pricing(pricing_id, active=False)
