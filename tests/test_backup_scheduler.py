from __future__ import annotations

import threading
from datetime import datetime, time

import pytest

from src.print_tracker.print_tracker.core.exceptions import ValidationError
from src.print_tracker.print_tracker.maintenance.backup import BackupError, BackupService, list_backups
from src.print_tracker.print_tracker.maintenance.scheduler import BackupScheduler, parse_backup_time, seconds_until


class RecordingService:
    def __init__(self, error=None):
        self.calls = 0
        self.error = error
        self.called = threading.Event()

    def run(self):
        self.calls += 1
        self.called.set()
        if self.error:
            raise self.error
        return "backups/print_tracker_20260310_020000.sql.gz"


def test_parse_backup_time():
    assert parse_backup_time("02:00") == time(2, 0)
    assert parse_backup_time(" 23:45 ") == time(23, 45)
    assert parse_backup_time(time(4, 30)) == time(4, 30)


@pytest.mark.parametrize("value", ["2am", "25:00", "02:61", ""])
def test_parse_backup_time_rejects_garbage(value):
    with pytest.raises(ValidationError):
        parse_backup_time(value)


def test_seconds_until_later_today():
    assert seconds_until(time(2, 0), datetime(2026, 3, 10, 1, 30)) == 30 * 60


def test_seconds_until_rolls_over_to_tomorrow():
    assert seconds_until(time(2, 0), datetime(2026, 3, 10, 2, 0)) == 24 * 3600
    assert seconds_until(time(2, 0), datetime(2026, 3, 10, 3, 0)) == 23 * 3600


def test_run_once_writes_a_backup_and_applies_retention(sqlite_data, tmp_path):
    backup_dir = tmp_path / "backups"
    backup_dir.mkdir()
    for name in ("print_tracker_20260101_020000.sqlite3.gz", "print_tracker_20260102_020000.sqlite3.gz"):
        (backup_dir / name).write_bytes(b"old")
    service = BackupService(
        backend="sqlite",
        backup_dir=backup_dir,
        sqlite_path=str(tmp_path / "print_tracker.sqlite3"),
        keep=1,
    )

    assert BackupScheduler(service).run_once() is True

    remaining = list_backups(backup_dir)
    assert len(remaining) == 1
    assert remaining[0].path.read_bytes() != b"old"


def test_run_once_logs_and_survives_failures():
    service = RecordingService(error=BackupError("mysqldump not found"))

    assert BackupScheduler(service).run_once() is False
    assert service.calls == 1


def test_scheduler_thread_runs_at_the_configured_time_and_stops():
    service = RecordingService()
    almost_two = datetime(2026, 3, 10, 1, 59, 59, 990000)
    scheduler = BackupScheduler(service, run_at="02:00", now=lambda: almost_two)

    scheduler.start()
    try:
        assert scheduler.is_running
        assert service.called.wait(timeout=2.0)
    finally:
        scheduler.stop()

    assert not scheduler.is_running


def test_stop_without_start_is_a_no_op():
    BackupScheduler(RecordingService()).stop()
