from __future__ import annotations

import io
from datetime import date
from decimal import Decimal

import openpyxl
import pytest

from src.print_tracker.print_tracker.core.exceptions import ConnectionFailure, ValidationError
from src.print_tracker.print_tracker.reports.exporters import JOB_CSV_FIELDS, render_excel, render_jobs_csv
from src.print_tracker.print_tracker.reports.service import ReportService


class FakeReportsRepo:
    """Aggregates computed in Python over a fixed job list, the way the SQL does it."""

    def __init__(self, jobs=None):
        self.jobs = jobs or []
        self.calls = []

    def _in_range(self, start, end):
        self.calls.append((start, end))
        return [j for j in self.jobs if start <= j["created_at"] <= end]

    def daily_summary(self, *, start, end):
        rows = self._in_range(start, end)
        return {
            "total_jobs": len(rows),
            "total_revenue": sum((j["amount"] for j in rows), Decimal("0")),
            "active_workers": len({j["worker_id"] for j in rows if j["worker_id"] is not None}),
            "active_machines": len({j["machine_name"] for j in rows}),
        }

    def machine_summary(self, *, start, end):
        rows = self._in_range(start, end)
        return [
            {
                "machine_id": 1,
                "machine_name": "Roland VG3-640",
                "machine_type": "large_format",
                "job_count": len([j for j in rows if j["machine_name"] == "Roland VG3-640"]),
                "total_revenue": sum((j["amount"] for j in rows if j["machine_name"] == "Roland VG3-640"), Decimal("0")),
            },
            {
                "machine_id": 2,
                "machine_name": "Konica Minolta C4080",
                "machine_type": "digital_press",
                "job_count": len([j for j in rows if j["machine_name"] == "Konica Minolta C4080"]),
                "total_revenue": sum(
                    (j["amount"] for j in rows if j["machine_name"] == "Konica Minolta C4080"), Decimal("0")
                ),
            },
        ]

    def worker_summary(self, *, start, end):
        self._in_range(start, end)
        return [
            {"worker_id": 2, "worker_name": "Grace", "machine_name": "Roland VG3-640", "job_count": 1, "total_revenue": "100.00"},
            {"worker_id": 3, "worker_name": "Dan", "machine_name": "Konica Minolta C4080", "job_count": 1, "total_revenue": 250.0},
        ]

    def job_type_summary(self, *, start, end):
        self._in_range(start, end)
        return [
            {"job_type_id": 1, "job_type_name": "Banner", "machine_type": "large_format", "unit": "sqm", "job_count": 3, "total_revenue": Decimal("100.00")},
            {"job_type_id": 2, "job_type_name": "Sticker", "machine_type": "large_format", "unit": "sqm", "job_count": 0, "total_revenue": None},
        ]

    def detailed_jobs(self, *, start, end):
        rows = self._in_range(start, end)
        return [
            {
                "job_id": j["job_id"],
                "description": j["description"],
                "worker_name": j["worker_name"],
                "machine_name": j["machine_name"],
                "job_type_name": j["job_type_name"],
                "width_cm": j.get("width_cm"),
                "height_cm": j.get("height_cm"),
                "quantity": j.get("quantity"),
                "rate": j["rate"],
                "amount": j["amount"],
                "created_at": j["created_at"],
            }
            for j in sorted(rows, key=lambda j: j["created_at"], reverse=True)
        ]


JOBS = [
    {
        "job_id": 1,
        "worker_id": 2,
        "worker_name": "Grace",
        "machine_name": "Roland VG3-640",
        "job_type_name": "Banner",
        "description": "Shop banner",
        "width_cm": "200.00",
        "height_cm": "100.00",
        "rate": Decimal("50.00"),
        "amount": Decimal("100.00"),
        "created_at": "2026-03-10 09:15:00",
    },
    {
        "job_id": 2,
        "worker_id": None,
        "worker_name": None,
        "machine_name": "Konica Minolta C4080",
        "job_type_name": "Flyers",
        "description": "Fair flyers",
        "quantity": 500,
        "rate": Decimal("0.50"),
        "amount": Decimal("250.00"),
        "created_at": "2026-03-10 23:59:59",
    },
    {
        "job_id": 3,
        "worker_id": 2,
        "worker_name": "Grace",
        "machine_name": "Roland VG3-640",
        "job_type_name": "Banner",
        "description": "Next day",
        "rate": Decimal("50.00"),
        "amount": Decimal("10.00"),
        "created_at": "2026-03-11 00:00:00",
    },
]


@pytest.fixture
def service():
    return ReportService(FakeReportsRepo(JOBS))


def test_daily_summary_uses_inclusive_day_bounds(service):
    summary = service.get_daily_summary("2026-03-10")

    assert summary.total_jobs == 2
    assert summary.total_revenue == Decimal("350.00")
    assert summary.active_workers == 1
    assert summary.active_machines == 2


def test_zero_filled_summary_for_a_quiet_day(service):
    summary = service.get_daily_summary(date(2026, 1, 1))

    assert summary.total_jobs == 0
    assert summary.total_revenue == Decimal("0.00")


def test_detailed_jobs_sum_matches_summary(service):
    day = date(2026, 3, 10)
    jobs = service.get_detailed_jobs(day)

    assert sum(j.amount for j in jobs) == service.get_daily_summary(day).total_revenue
    assert [j.job_id for j in jobs] == [2, 1]
    assert jobs[0].worker_name is None


def test_summaries_sorted_by_revenue(service):
    machines = service.get_machine_summary("2026-03-10")
    workers = service.get_worker_summary("2026-03-10")

    assert [m.machine_name for m in machines] == ["Konica Minolta C4080", "Roland VG3-640"]
    assert [w.worker_name for w in workers] == ["Dan", "Grace"]
    assert workers[0].total_revenue == Decimal("250.00")


def test_job_type_average(service):
    rows = service.get_job_type_summary("2026-03-10")
    by_name = {r.job_type_name: r for r in rows}

    assert by_name["Banner"].average_revenue == Decimal("33.33")
    assert by_name["Sticker"].average_revenue == Decimal("0.00")
    assert by_name["Sticker"].total_revenue == Decimal("0.00")


def test_invalid_date_string():
    with pytest.raises(ValidationError):
        ReportService(FakeReportsRepo()).get_daily_summary("2026-13-45")


def test_build_daily_report_runs_every_view(service):
    report = service.build_daily_report("2026-03-10")

    assert report.summary.total_revenue == Decimal("350.00")
    assert len(report.machines) == 2
    assert len(report.jobs) == 2
    assert len(report.job_types) == 2


def test_data_access_errors_propagate():
    class BrokenRepo(FakeReportsRepo):
        def daily_summary(self, *, start, end):
            raise ConnectionFailure("database unavailable")

    with pytest.raises(ConnectionFailure):
        ReportService(BrokenRepo()).build_daily_report("2026-03-10")


def test_excel_export_has_one_sheet_per_view(service):
    payload = render_excel(service.build_daily_report("2026-03-10"))
    workbook = openpyxl.load_workbook(io.BytesIO(payload))

    assert workbook.sheetnames == [
        "Daily Summary",
        "Machine Summary",
        "Worker Summary",
        "Job Type Summary",
        "Detailed Jobs",
    ]
    detailed = workbook["Detailed Jobs"]
    values = [cell.value for row in detailed.iter_rows() for cell in row]
    assert "Deleted User" in values


def test_csv_export_has_bom_and_header(service):
    payload = render_jobs_csv(service.build_daily_report("2026-03-10"))

    assert payload.startswith(b"\xef\xbb\xbf")
    text = payload.decode("utf-8-sig")
    header = text.splitlines()[0]
    assert header.split(",") == list(JOB_CSV_FIELDS)
    assert "Deleted User" in text
    assert "250.00" in text
