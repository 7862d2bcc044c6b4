from __future__ import annotations

import importlib

import pytest

from src.print_tracker.print_tracker.common.datetime_utils import today_local
from src.print_tracker.print_tracker.main import create_app


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    settings = importlib.import_module("config.testing")
    monkeypatch.setattr(settings, "SQLITE_PATH", str(tmp_path / "app.sqlite3"))
    monkeypatch.setattr(settings, "BACKUP_DIR", str(tmp_path / "backups"))
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, username, password):
    return client.post("/api/auth/login", json={"username": username, "password": password})


@pytest.fixture
def admin(client):
    assert login(client, "admin", "Admin#2026").status_code == 200
    return client


@pytest.fixture
def grace(client):
    assert login(client, "grace", "Worker#2026").status_code == 200
    return client


def job_type_id(client, name):
    return next(t["job_type_id"] for t in client.get("/api/jobs/job-types").get_json()["data"] if t["name"] == name)


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["database"] == "sqlite"


def test_login_sets_session(client):
    resp = login(client, "grace", "Worker#2026")

    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["user"]["role"] == "worker"
    assert "password_hash" not in body["data"]["user"]
    assert "X-RateLimit-Limit" in resp.headers


def test_wrong_password(client):
    resp = login(client, "grace", "nope")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials. 9 attempts remaining."


def test_tenth_failure_locks_with_retry_after(client):
    for _ in range(9):
        assert login(client, "grace", "nope").status_code == 401

    resp = login(client, "grace", "nope")
    assert resp.status_code == 429
    assert resp.headers["Retry-After"] == "900"

    assert login(client, "grace", "Worker#2026").status_code == 429


def test_non_string_username_is_a_bad_request(client):
    resp = client.post("/api/auth/login", json={"username": 42, "password": "Worker#2026"})

    assert resp.status_code == 400


def test_lockout_is_reachable_with_default_rate_limits(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    settings = importlib.import_module("config.testing")
    monkeypatch.setattr(settings, "SQLITE_PATH", str(tmp_path / "defaults.sqlite3"))
    monkeypatch.setattr(settings, "RATE_LIMITS", {})
    app = create_app()
    client = app.test_client()

    statuses = [login(client, "grace", "nope").status_code for _ in range(10)]

    assert statuses == [401] * 9 + [429]
    assert app.extensions["print_tracker"].login_guard.is_locked("grace")
    assert app.extensions["print_tracker"].rate_limiter.rule_for("login")[1].max_requests == 10


def test_endpoints_require_login(client):
    assert client.get("/api/jobs").status_code == 401
    assert client.get("/api/admin/reports/daily").status_code == 401


def test_worker_cannot_use_admin_endpoints(grace):
    assert grace.get("/api/admin/users").status_code == 403


def test_worker_logs_a_job(grace):
    banner = job_type_id(grace, "Banner")

    resp = grace.post(
        "/api/jobs",
        json={"job_type_id": banner, "description": "Shop banner", "width_cm": 200, "height_cm": 100, "rate": 50},
    )

    assert resp.status_code == 201
    assert resp.get_json()["data"]["amount"] == "100.00"

    mine = grace.get("/api/jobs").get_json()["data"]
    assert mine["pagination"]["total"] == 1
    assert mine["jobs"][0]["job_type_name"] == "Banner"

    total = grace.get("/api/jobs/daily-total").get_json()["data"]
    assert total["total_amount"] == "100.00"


def test_job_validation_errors(grace):
    banner = job_type_id(grace, "Banner")

    missing = grace.post("/api/jobs", json={"job_type_id": banner, "rate": 50})
    assert missing.status_code == 400

    bad_dims = grace.post(
        "/api/jobs",
        json={"job_type_id": banner, "description": "x", "width_cm": -1, "height_cm": 100, "rate": 50},
    )
    assert bad_dims.status_code == 400
    assert bad_dims.get_json()["field"] == "width_cm"


def test_admin_daily_report_and_exports(client):
    login(client, "grace", "Worker#2026")
    banner = job_type_id(client, "Banner")
    client.post(
        "/api/jobs",
        json={"job_type_id": banner, "description": "Shop banner", "width_cm": 200, "height_cm": 100, "rate": 50},
    )
    client.post("/api/auth/logout")

    login(client, "admin", "Admin#2026")
    day = today_local().isoformat()

    summary = client.get(f"/api/admin/reports/daily?date={day}").get_json()["data"]
    assert summary["total_jobs"] == 1
    assert summary["total_revenue"] == "100.00"

    jobs = client.get(f"/api/admin/reports/jobs?date={day}").get_json()["data"]
    assert [j["amount"] for j in jobs] == ["100.00"]

    csv_resp = client.get(f"/api/admin/reports/export.csv?date={day}")
    assert csv_resp.status_code == 200
    assert csv_resp.data.startswith(b"\xef\xbb\xbf")
    assert "attachment" in csv_resp.headers["Content-Disposition"]

    xlsx = client.get(f"/api/admin/reports/export.xlsx?date={day}")
    assert xlsx.status_code == 200
    assert xlsx.data[:2] == b"PK"


def test_invalid_report_date(admin):
    resp = admin.get("/api/admin/reports/daily?date=2026-02-30")

    assert resp.status_code == 400
    assert resp.get_json()["field"] == "date"


def test_admin_manages_users_and_machines(admin):
    created = admin.post("/api/admin/machines", json={"name": "Epson S80600", "type": "large_format"})
    assert created.status_code == 201
    machine_id = created.get_json()["data"]["id"]

    user = admin.post(
        "/api/admin/users",
        json={"name": "Nora", "username": "nora", "password": "Nora#2026x", "role": "worker", "machine_id": machine_id},
    )
    assert user.status_code == 201

    weak = admin.post(
        "/api/admin/users",
        json={"name": "Weak", "username": "weak", "password": "weak", "role": "worker"},
    )
    assert weak.status_code == 400
    assert weak.get_json()["errors"]

    user_id = user.get_json()["data"]["id"]
    assert admin.delete(f"/api/admin/users/{user_id}").status_code == 200
    assert admin.delete(f"/api/admin/users/{user_id}").status_code == 404


def test_pricing_admin_and_audit_trail(admin):
    pricing = admin.get("/api/admin/pricing").get_json()["data"]
    banner = next(p for p in pricing if p["job_type_name"] == "Banner")

    resp = admin.post("/api/admin/pricing", json={"job_type_id": banner["job_type_id"], "rate": "55"})
    assert resp.status_code == 201

    rows = admin.get(f"/api/admin/pricing?job_type_id={banner['job_type_id']}").get_json()["data"]
    assert [r["active"] for r in sorted(rows, key=lambda r: r["pricing_id"])] == [False, True]

    assert admin.patch(f"/api/admin/pricing/{banner['pricing_id']}", json={}).status_code == 400

    entries = admin.get("/api/admin/audit-logs").get_json()["data"]
    actions = [e["action"] for e in entries]
    assert "pricing_create" in actions
    assert "login" in actions
    login_entry = next(e for e in entries if e["action"] == "login")
    assert login_entry["details"]["body"]["password"] == "[REDACTED]"


def test_change_password(grace):
    resp = grace.post(
        "/api/auth/change-password",
        json={"current_password": "Worker#2026", "new_password": "Grace#2027!"},
    )
    assert resp.status_code == 200

    grace.post("/api/auth/logout")
    assert login(grace, "grace", "Worker#2026").status_code == 401
    assert login(grace, "grace", "Grace#2027!").status_code == 200


def test_backups_endpoint(admin):
    created = admin.post("/api/admin/backups")
    assert created.status_code == 201

    listing = admin.get("/api/admin/backups").get_json()["data"]
    assert [b["file"] for b in listing] == [created.get_json()["data"]["file"]]


def test_unknown_api_route_is_json(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False
