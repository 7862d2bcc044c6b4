from __future__ import annotations

from flask import Flask

from ..audit.middleware import audit_action
from ..common.http import admin_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/backups", methods=["GET"], endpoint="list_backups")
    @admin_required
    def list_backups():
        return ok(
            [
                {"file": b.path.name, "size_bytes": b.size_bytes, "created_at": b.created_at}
                for b in container.backup_service.list()
            ]
        )

    @app.route("/api/admin/backups", methods=["POST"], endpoint="create_backup")
    @admin_required
    @audit_action("backup_create")
    def create_backup():
        path = container.backup_service.run()
        return ok({"file": path.name}, status=201, message="Backup created successfully")
