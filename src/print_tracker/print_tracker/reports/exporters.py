"""Spreadsheet exports of a DailyReport.

PDF layout is rendered elsewhere; this module only produces Excel and CSV.
"""

from __future__ import annotations

import csv
import io
from decimal import Decimal
from typing import Optional

import pandas as pd

from ..core.constants import DELETED_WORKER_LABEL
from .model import DailyReport

JOB_CSV_FIELDS = [
    "id",
    "description",
    "worker_name",
    "machine_name",
    "job_type_name",
    "width_cm",
    "height_cm",
    "quantity",
    "rate",
    "amount",
    "created_at",
]


def _num(value: Optional[Decimal]):
    return float(value) if value is not None else None


def _created(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


def _sheets(report: DailyReport) -> dict[str, pd.DataFrame]:
    s = report.summary
    summary = pd.DataFrame(
        [
            {"Metric": "Date", "Value": report.day.isoformat()},
            {"Metric": "Total Jobs", "Value": s.total_jobs},
            {"Metric": "Total Revenue", "Value": _num(s.total_revenue)},
            {"Metric": "Active Workers", "Value": s.active_workers},
            {"Metric": "Active Machines", "Value": s.active_machines},
        ]
    )
    machines = pd.DataFrame(
        [
            {
                "Machine Name": m.machine_name,
                "Machine Type": m.machine_type.value,
                "Job Count": m.job_count,
                "Total Revenue": _num(m.total_revenue),
            }
            for m in report.machines
        ],
        columns=["Machine Name", "Machine Type", "Job Count", "Total Revenue"],
    )
    workers = pd.DataFrame(
        [
            {
                "Worker Name": w.worker_name,
                "Machine": w.machine_name or "",
                "Job Count": w.job_count,
                "Total Revenue": _num(w.total_revenue),
            }
            for w in report.workers
        ],
        columns=["Worker Name", "Machine", "Job Count", "Total Revenue"],
    )
    job_types = pd.DataFrame(
        [
            {
                "Job Type": t.job_type_name,
                "Machine Type": t.machine_type.value,
                "Unit": t.unit.value,
                "Job Count": t.job_count,
                "Total Revenue": _num(t.total_revenue),
                "Average Amount": _num(t.average_revenue),
            }
            for t in report.job_types
        ],
        columns=["Job Type", "Machine Type", "Unit", "Job Count", "Total Revenue", "Average Amount"],
    )
    jobs = pd.DataFrame(
        [
            {
                "ID": j.job_id,
                "Description": j.description,
                "Worker": j.worker_name or DELETED_WORKER_LABEL,
                "Machine": j.machine_name,
                "Job Type": j.job_type_name,
                "Width (cm)": _num(j.width_cm),
                "Height (cm)": _num(j.height_cm),
                "Quantity": j.quantity,
                "Rate": _num(j.rate),
                "Amount": _num(j.amount),
                "Created At": _created(j.created_at),
            }
            for j in report.jobs
        ],
        columns=[
            "ID",
            "Description",
            "Worker",
            "Machine",
            "Job Type",
            "Width (cm)",
            "Height (cm)",
            "Quantity",
            "Rate",
            "Amount",
            "Created At",
        ],
    )
    return {
        "Daily Summary": summary,
        "Machine Summary": machines,
        "Worker Summary": workers,
        "Job Type Summary": job_types,
        "Detailed Jobs": jobs,
    }


def render_excel(report: DailyReport) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for name, df in _sheets(report).items():
            df.to_excel(writer, index=False, sheet_name=name)
    return output.getvalue()


def render_jobs_csv(report: DailyReport) -> bytes:
    """Detailed jobs as CSV, UTF-8 with BOM so spreadsheet apps detect the encoding."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=JOB_CSV_FIELDS)
    writer.writeheader()
    for j in report.jobs:
        writer.writerow(
            {
                "id": j.job_id,
                "description": j.description,
                "worker_name": j.worker_name or DELETED_WORKER_LABEL,
                "machine_name": j.machine_name,
                "job_type_name": j.job_type_name,
                "width_cm": "" if j.width_cm is None else str(j.width_cm),
                "height_cm": "" if j.height_cm is None else str(j.height_cm),
                "quantity": "" if j.quantity is None else j.quantity,
                "rate": str(j.rate),
                "amount": str(j.amount),
                "created_at": _created(j.created_at),
            }
        )
    return out.getvalue().encode("utf-8-sig")
