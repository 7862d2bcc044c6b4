from __future__ import annotations

import json
from datetime import date

import pytest

from src.print_tracker.print_tracker.audit.service import AuditService
from src.print_tracker.print_tracker.core.exceptions import ConnectionFailure, ValidationError


class FakeAuditRepo:
    def __init__(self, fail=False):
        self.rows = []
        self.fail = fail
        self.last_query = None

    def insert(self, *, user_id, action, details_json, ip_address, user_agent):
        if self.fail:
            raise ConnectionFailure("database unavailable")
        self.rows.append({"user_id": user_id, "action": action, "details": json.loads(details_json)})
        return len(self.rows)

    def list_entries(self, **kwargs):
        self.last_query = kwargs
        return []


def test_credentials_are_redacted():
    repo = FakeAuditRepo()
    AuditService(repo).record(
        action="login",
        user_id=None,
        details={"body": {"username": "grace", "password": "Worker#2026"}, "new_password": "x"},
    )

    details = repo.rows[0]["details"]
    assert details["new_password"] == "[REDACTED]"
    assert details["body"]["password"] == "[REDACTED]"
    assert details["body"]["username"] == "grace"


def test_failed_write_does_not_raise():
    assert AuditService(FakeAuditRepo(fail=True)).record(action="login", user_id=1) is None


def test_list_entries_validates_paging():
    service = AuditService(FakeAuditRepo())

    with pytest.raises(ValidationError):
        service.list_entries(limit=0)
    with pytest.raises(ValidationError):
        service.list_entries(limit=501)
    with pytest.raises(ValidationError):
        service.list_entries(offset=-1)


def test_list_entries_turns_dates_into_bounds():
    repo = FakeAuditRepo()
    AuditService(repo).list_entries(action="  login ", start=date(2026, 3, 1), end=date(2026, 3, 2))

    assert repo.last_query["action"] == "login"
    assert repo.last_query["start"] == "2026-03-01 00:00:00"
    assert repo.last_query["end"] == "2026-03-02 23:59:59"
