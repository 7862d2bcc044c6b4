from __future__ import annotations

from typing import Sequence

from ..database.connection import DataAccess
from .repository import ReportRepository


class SQLReportRepository(ReportRepository):
    def __init__(self, data: DataAccess):
        self._data = data

    def daily_summary(self, *, start: str, end: str) -> dict:
        rows = self._data.query(
            """
            SELECT COUNT(j.id) AS total_jobs,
                   COALESCE(SUM(j.amount), 0) AS total_revenue,
                   COUNT(DISTINCT j.worker_id) AS active_workers,
                   COUNT(DISTINCT j.machine_id) AS active_machines
            FROM jobs j
            WHERE j.created_at BETWEEN %s AND %s
            """,
            (start, end),
        )
        return rows[0] if rows else {}

    def machine_summary(self, *, start: str, end: str) -> Sequence[dict]:
        return self._data.query(
            """
            SELECT m.id AS machine_id, m.name AS machine_name, m.type AS machine_type,
                   COUNT(j.id) AS job_count,
                   COALESCE(SUM(j.amount), 0) AS total_revenue
            FROM machines m
            LEFT JOIN jobs j ON m.id = j.machine_id AND j.created_at BETWEEN %s AND %s
            GROUP BY m.id, m.name, m.type
            ORDER BY total_revenue DESC, m.name
            """,
            (start, end),
        )

    def worker_summary(self, *, start: str, end: str) -> Sequence[dict]:
        return self._data.query(
            """
            SELECT u.id AS worker_id, u.name AS worker_name, m.name AS machine_name,
                   COUNT(j.id) AS job_count,
                   COALESCE(SUM(j.amount), 0) AS total_revenue
            FROM users u
            LEFT JOIN machines m ON u.machine_id = m.id
            LEFT JOIN jobs j ON u.id = j.worker_id AND j.created_at BETWEEN %s AND %s
            WHERE u.role = 'worker'
            GROUP BY u.id, u.name, m.name
            ORDER BY total_revenue DESC, u.name
            """,
            (start, end),
        )

    def job_type_summary(self, *, start: str, end: str) -> Sequence[dict]:
        return self._data.query(
            """
            SELECT jt.id AS job_type_id, jt.name AS job_type_name, jt.machine_type, jt.unit,
                   COUNT(j.id) AS job_count,
                   COALESCE(SUM(j.amount), 0) AS total_revenue
            FROM job_types jt
            LEFT JOIN jobs j ON jt.id = j.job_type_id AND j.created_at BETWEEN %s AND %s
            GROUP BY jt.id, jt.name, jt.machine_type, jt.unit
            ORDER BY total_revenue DESC, jt.name
            """,
            (start, end),
        )

    def detailed_jobs(self, *, start: str, end: str) -> Sequence[dict]:
        return self._data.query(
            """
            SELECT j.id AS job_id, j.description, u.name AS worker_name, m.name AS machine_name,
                   jt.name AS job_type_name, j.width_cm, j.height_cm, j.quantity,
                   j.rate, j.amount, j.created_at
            FROM jobs j
            LEFT JOIN users u ON j.worker_id = u.id
            INNER JOIN machines m ON j.machine_id = m.id
            INNER JOIN job_types jt ON j.job_type_id = jt.id
            WHERE j.created_at BETWEEN %s AND %s
            ORDER BY j.created_at DESC, j.id DESC
            """,
            (start, end),
        )
