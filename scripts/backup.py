"""Back up the database, then prune old backups.

MySQL needs `mysqldump` on PATH. SQLite is copied without any external tool.

    python scripts/backup.py            # backup + keep BACKUP_KEEP newest
    python scripts/backup.py --list     # show existing backups
"""

from __future__ import annotations

import argparse

from _settings import load_settings

from src.print_tracker.print_tracker.maintenance.backup import BackupError, BackupService


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--list", action="store_true", help="list existing backups and exit")
    parser.add_argument("--keep", type=int, default=None, help="override BACKUP_KEEP")
    args = parser.parse_args()

    settings = load_settings()
    service = BackupService(
        backend=settings.DB_BACKEND,
        backup_dir=settings.BACKUP_DIR,
        db_config=dict(settings.DB_CONFIG),
        sqlite_path=settings.SQLITE_PATH,
        keep=args.keep or settings.BACKUP_KEEP,
    )

    if args.list:
        for backup in service.list():
            print(f"{backup.created_at:%Y-%m-%d %H:%M:%S}  {backup.size_bytes:>10}  {backup.path.name}")
        return

    try:
        path = service.run()
    except BackupError as exc:
        raise SystemExit(str(exc))
    print(f"OK: Backup created: {path}")


if __name__ == "__main__":
    main()
