"""Repositories against a real SQLite database built from database/schema.sqlite.sql."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.print_tracker.print_tracker.audit.service import AuditService
from src.print_tracker.print_tracker.audit.sql_audit_repository import SQLAuditRepository
from src.print_tracker.print_tracker.core.enums import MachineStatus, MachineType, Role
from src.print_tracker.print_tracker.core.exceptions import DuplicateKeyError, IncompatibleJobType
from src.print_tracker.print_tracker.database.bootstrap import list_tables
from src.print_tracker.print_tracker.jobs.service import JobService
from src.print_tracker.print_tracker.jobs.sql_job_repository import SQLJobRepository
from src.print_tracker.print_tracker.machines.sql_machine_repository import SQLMachineRepository
from src.print_tracker.print_tracker.pricing.service import PricingService
from src.print_tracker.print_tracker.pricing.sql_pricing_repository import SQLPricingRepository
from src.print_tracker.print_tracker.reports.service import ReportService
from src.print_tracker.print_tracker.reports.sql_report_repository import SQLReportRepository
from src.print_tracker.print_tracker.users.sql_user_repository import SQLUserRepository

DAY = date(2026, 3, 10)


def _id(data, sql, *params):
    return int(data.query(sql, params)[0]["id"])


@pytest.fixture
def ids(sqlite_data):
    data = sqlite_data
    return {
        "roland": _id(data, "SELECT id FROM machines WHERE name = %s", "Roland VG3-640"),
        "konica": _id(data, "SELECT id FROM machines WHERE name = %s", "Konica Minolta C4080"),
        "banner": _id(data, "SELECT id FROM job_types WHERE name = %s", "Banner"),
        "flyers": _id(data, "SELECT id FROM job_types WHERE name = %s", "Flyers"),
        "grace": _id(data, "SELECT id FROM users WHERE username = %s", "grace"),
        "dan": _id(data, "SELECT id FROM users WHERE username = %s", "dan"),
    }


@pytest.fixture
def jobs_logged(sqlite_data, ids):
    """Banner 200x100cm @ 50/sqm by grace and 500 flyers @ 0.50 by dan, both on DAY."""
    service = JobService(SQLJobRepository(sqlite_data))
    banner = service.create_job(
        worker_id=ids["grace"],
        machine_id=ids["roland"],
        job_type_id=ids["banner"],
        description="Shop banner",
        dimensions={"width_cm": 200, "height_cm": 100},
        manual_rate="50",
    )
    flyers = service.create_job(
        worker_id=ids["dan"],
        machine_id=ids["konica"],
        job_type_id=ids["flyers"],
        description="Fair flyers",
        dimensions={"quantity": 500},
        manual_rate="0.5",
    )
    sqlite_data.execute("UPDATE jobs SET created_at = %s WHERE id = %s", ("2026-03-10 09:00:00", banner.job_id))
    sqlite_data.execute("UPDATE jobs SET created_at = %s WHERE id = %s", ("2026-03-10 14:30:00", flyers.job_id))
    return banner, flyers


def test_schema_creates_every_table(sqlite_data):
    assert {"machines", "users", "job_types", "pricing", "jobs", "audit_logs"} <= set(list_tables(sqlite_data))


def test_job_amounts_are_persisted(sqlite_data, jobs_logged):
    banner, flyers = jobs_logged

    assert banner.amount == Decimal("100.00")
    assert flyers.amount == Decimal("250.00")
    row = sqlite_data.query("SELECT width_cm, height_cm, quantity FROM jobs WHERE id = %s", (flyers.job_id,))[0]
    assert row["width_cm"] is None and row["height_cm"] is None
    assert row["quantity"] == 500


def test_incompatible_job_type_is_rejected(sqlite_data, ids):
    with pytest.raises(IncompatibleJobType):
        JobService(SQLJobRepository(sqlite_data)).create_job(
            worker_id=ids["grace"],
            machine_id=ids["roland"],
            job_type_id=ids["flyers"],
            description="Wrong machine",
            dimensions={"quantity": 10},
            manual_rate="1",
        )


def test_job_types_for_machine_carry_active_rate(sqlite_data, ids):
    rows = SQLJobRepository(sqlite_data).job_types_for_machine(ids["roland"])

    assert [r.name for r in rows] == ["Banner", "Sticker"]
    assert rows[0].rate == Decimal("50.00")


def test_daily_report(sqlite_data, jobs_logged):
    service = ReportService(SQLReportRepository(sqlite_data))

    summary = service.get_daily_summary(DAY)
    jobs = service.get_detailed_jobs(DAY)

    assert summary.total_jobs == 2
    assert summary.total_revenue == Decimal("350.00")
    assert summary.active_workers == 2
    assert summary.active_machines == 2
    assert sum(j.amount for j in jobs) == summary.total_revenue
    assert [j.job_type_name for j in jobs] == ["Flyers", "Banner"]

    machines = service.get_machine_summary(DAY)
    assert [(m.machine_name, m.total_revenue) for m in machines] == [
        ("Konica Minolta C4080", Decimal("250.00")),
        ("Roland VG3-640", Decimal("100.00")),
    ]

    job_types = {t.job_type_name: t for t in service.get_job_type_summary(DAY)}
    assert job_types["Flyers"].average_revenue == Decimal("250.00")
    assert job_types["Sticker"].job_count == 0
    assert job_types["Sticker"].average_revenue == Decimal("0.00")


def test_zero_job_day(sqlite_data, jobs_logged):
    service = ReportService(SQLReportRepository(sqlite_data))
    quiet = date(2026, 3, 11)

    summary = service.get_daily_summary(quiet)
    assert (summary.total_jobs, summary.total_revenue, summary.active_workers) == (0, Decimal("0.00"), 0)
    assert service.get_detailed_jobs(quiet) == []
    assert all(m.total_revenue == Decimal("0.00") for m in service.get_machine_summary(quiet))
    assert {w.worker_name for w in service.get_worker_summary(quiet)} == {"Grace Large", "Dan Digital"}


def test_deleting_a_worker_keeps_their_jobs(sqlite_data, ids, jobs_logged):
    users = SQLUserRepository(sqlite_data)
    assert users.delete_by_id(ids["grace"])

    service = ReportService(SQLReportRepository(sqlite_data))
    report = service.build_daily_report(DAY)

    assert report.summary.total_revenue == Decimal("350.00")
    banner = next(j for j in report.jobs if j.job_type_name == "Banner")
    assert banner.worker_name is None
    assert [w.worker_name for w in report.workers] == ["Dan Digital"]


def test_worker_self_service_reads(sqlite_data, ids, jobs_logged):
    service = JobService(SQLJobRepository(sqlite_data))

    total = service.worker_daily_total(worker_id=ids["dan"], day=DAY)
    assert total.job_count == 1
    assert total.total_amount == Decimal("250.00")
    assert total.by_job_type[0].job_type_name == "Flyers"

    page = service.list_worker_jobs(worker_id=ids["dan"], start=DAY, end=DAY, limit=10)
    assert page.total == 1
    assert page.jobs[0].amount == Decimal("250.00")
    assert page.jobs[0].machine_name == "Konica Minolta C4080"


def test_new_active_pricing_replaces_the_old_one(sqlite_data, ids):
    service = PricingService(SQLPricingRepository(sqlite_data))

    new_id = service.create_pricing(job_type_id=ids["banner"], rate="60")

    assert service.get_active_rate(ids["banner"]) == Decimal("60.00")
    history = service.list_for_job_type(ids["banner"])
    assert [p.active for p in sorted(history, key=lambda p: p.pricing_id)] == [False, True]

    service.deactivate_pricing(new_id)
    assert SQLPricingRepository(sqlite_data).active_rates(ids["banner"]) == []


def test_reactivating_pricing_deactivates_siblings(sqlite_data, ids):
    repo = SQLPricingRepository(sqlite_data)
    service = PricingService(repo)
    original = repo.active_rates(ids["flyers"])[0].pricing_id
    service.create_pricing(job_type_id=ids["flyers"], rate="0.45")

    service.update_pricing(original, active=True)

    active = repo.active_rates(ids["flyers"])
    assert [p.pricing_id for p in active] == [original]


def test_duplicate_username_is_a_constraint_violation(sqlite_data):
    users = SQLUserRepository(sqlite_data)

    with pytest.raises(DuplicateKeyError):
        users.create_user(
            name="Other Grace",
            username="grace",
            password_hash="x",
            role=Role.WORKER,
            machine_id=None,
            department=None,
        )


def test_machines_and_users_listing(sqlite_data, ids):
    machines = SQLMachineRepository(sqlite_data)
    new_id = machines.create(name="Epson S80600", machine_type=MachineType.LARGE_FORMAT, status=MachineStatus.ACTIVE)

    assert machines.get_by_id(new_id).machine_type == MachineType.LARGE_FORMAT
    listing = {u.username: u for u in SQLUserRepository(sqlite_data).list_all()}
    assert listing["grace"].machine_name == "Roland VG3-640"
    assert listing["admin"].role == Role.ADMIN


def test_audit_round_trip(sqlite_data, ids):
    service = AuditService(SQLAuditRepository(sqlite_data))
    service.record(action="login", user_id=ids["grace"], ip_address="10.0.0.1", details={"password": "secret"})
    service.record(action="job_create", user_id=ids["dan"], ip_address="10.0.0.2")

    entries = service.list_entries(action="login")

    assert len(entries) == 1
    assert entries[0].username == "grace"
    assert entries[0].details == {"password": "[REDACTED]"}
