from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.print_tracker.print_tracker.core.enums import JobUnit, MachineType
from src.print_tracker.print_tracker.core.exceptions import (
    IncompatibleJobType,
    InvalidDimensions,
    InvalidQuantity,
    InvalidRate,
    MissingFields,
    NoMachineAssigned,
    ValidationError,
)
from src.print_tracker.print_tracker.jobs.service import JobService
from src.print_tracker.print_tracker.pricing.model import JobType

LARGE_FORMAT_MACHINE = 1
DIGITAL_PRESS_MACHINE = 2


class FakeJobsRepo:
    def __init__(self):
        self.machines = {LARGE_FORMAT_MACHINE: MachineType.LARGE_FORMAT, DIGITAL_PRESS_MACHINE: MachineType.DIGITAL_PRESS}
        self.job_types = {
            1: JobType(job_type_id=1, machine_type=MachineType.LARGE_FORMAT, name="Banner", unit=JobUnit.SQM),
            3: JobType(job_type_id=3, machine_type=MachineType.DIGITAL_PRESS, name="Flyers", unit=JobUnit.PIECE),
        }
        self.inserted: list[dict] = []
        self.last_list_call = None

    def find_compatible_job_type(self, *, job_type_id, machine_id):
        jt = self.job_types.get(job_type_id)
        if jt and self.machines.get(machine_id) == jt.machine_type:
            return jt
        return None

    def insert(self, **row):
        self.inserted.append(row)
        return len(self.inserted)

    def list_for_worker(self, **kwargs):
        self.last_list_call = kwargs
        return []

    def count_for_worker(self, *, worker_id, start, end):
        return 0

    def worker_totals(self, *, worker_id, start, end):
        self.totals_range = (start, end)
        return 2, Decimal("350.00")

    def worker_totals_by_type(self, *, worker_id, start, end):
        return []

    def job_types_for_machine(self, machine_id):
        return []


@pytest.fixture
def repo():
    return FakeJobsRepo()


@pytest.fixture
def service(repo):
    return JobService(repo)


def _create(service, **overrides):
    args = dict(
        worker_id=7,
        machine_id=LARGE_FORMAT_MACHINE,
        job_type_id=1,
        description="Shop banner",
        dimensions={"width_cm": 200, "height_cm": 100},
        manual_rate="50",
    )
    args.update(overrides)
    return service.create_job(**args)


def test_creates_large_format_job(service, repo):
    created = _create(service)

    assert created.amount == Decimal("100.00")
    assert created.job_id == 1
    row = repo.inserted[0]
    assert row["width_cm"] == Decimal("200")
    assert row["quantity"] is None
    assert row["rate"] == Decimal("50.00")


def test_digital_press_job_drops_dimensions(service, repo):
    created = _create(
        service,
        machine_id=DIGITAL_PRESS_MACHINE,
        job_type_id=3,
        description="Flyers for the fair",
        dimensions={"width_cm": 21, "height_cm": 29.7, "quantity": 500},
        manual_rate=0.5,
    )

    assert created.amount == Decimal("250.00")
    row = repo.inserted[0]
    assert row["width_cm"] is None and row["height_cm"] is None
    assert row["quantity"] == 500


def test_description_is_sanitized(service, repo):
    _create(service, description="<b>Shop</b> banner<script>x()</script>")

    assert "<" not in repo.inserted[0]["description"]
    assert "Shop" in repo.inserted[0]["description"]


def test_no_machine_is_checked_first(service):
    with pytest.raises(NoMachineAssigned):
        _create(service, machine_id=None, job_type_id=None, manual_rate="-1")


def test_markup_only_description_counts_as_missing(service):
    with pytest.raises(MissingFields):
        _create(service, description="<script></script>")


def test_missing_fields_before_rate(service):
    with pytest.raises(MissingFields):
        _create(service, job_type_id=None, manual_rate="abc")


def test_rate_before_compatibility(service):
    with pytest.raises(InvalidRate):
        _create(service, job_type_id=3, manual_rate="0")


def test_incompatible_job_type(service, repo):
    with pytest.raises(IncompatibleJobType):
        _create(service, job_type_id=3)
    assert repo.inserted == []


def test_dimension_errors_come_last(service, repo):
    with pytest.raises(InvalidDimensions):
        _create(service, dimensions={"width_cm": 0, "height_cm": 100})
    with pytest.raises(InvalidQuantity):
        _create(service, machine_id=DIGITAL_PRESS_MACHINE, job_type_id=3, dimensions={"quantity": 0})
    assert repo.inserted == []


def test_job_types_require_a_machine(service):
    with pytest.raises(NoMachineAssigned):
        service.job_types_for_machine(None)


def test_list_worker_jobs_validates_sort_and_caps_limit(service, repo):
    with pytest.raises(ValidationError):
        service.list_worker_jobs(worker_id=7, sort="password_hash")
    with pytest.raises(ValidationError):
        service.list_worker_jobs(worker_id=7, order="sideways")

    page = service.list_worker_jobs(
        worker_id=7, start=date(2026, 3, 1), end=date(2026, 3, 31), limit=10_000, sort="amount", order="ASC"
    )

    assert page.limit == 500
    assert not page.has_more
    assert repo.last_list_call["start"] == "2026-03-01 00:00:00"
    assert repo.last_list_call["end"] == "2026-03-31 23:59:59"
    assert repo.last_list_call["descending"] is False


def test_worker_daily_total(service, repo):
    total = service.worker_daily_total(worker_id=7, day=date(2026, 3, 10))

    assert total.job_count == 2
    assert total.total_amount == Decimal("350.00")
    assert repo.totals_range == ("2026-03-10 00:00:00", "2026-03-10 23:59:59")
