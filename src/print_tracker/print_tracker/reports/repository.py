from __future__ import annotations

from typing import Protocol, Sequence


class ReportRepository(Protocol):
    """Read-only aggregate queries over jobs in a ``[start, end]`` datetime range.

    Rows are plain dicts; ReportService turns them into report models.
    """

    def daily_summary(self, *, start: str, end: str) -> dict:
        raise NotImplementedError

    def machine_summary(self, *, start: str, end: str) -> Sequence[dict]:
        raise NotImplementedError

    def worker_summary(self, *, start: str, end: str) -> Sequence[dict]:
        raise NotImplementedError

    def job_type_summary(self, *, start: str, end: str) -> Sequence[dict]:
        raise NotImplementedError

    def detailed_jobs(self, *, start: str, end: str) -> Sequence[dict]:
        raise NotImplementedError
