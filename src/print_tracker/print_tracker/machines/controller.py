from __future__ import annotations

from flask import Flask

from ..audit.middleware import audit_action
from ..common.http import admin_required, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/machines", methods=["GET"], endpoint="list_machines")
    @admin_required
    def list_machines():
        return ok(container.machine_service.list_machines())

    @app.route("/api/admin/machines", methods=["POST"], endpoint="create_machine")
    @admin_required
    @audit_action("machine_create")
    def create_machine():
        body = json_body()
        machine_id = container.machine_service.create_machine(
            name=body.get("name", ""),
            machine_type=body.get("type", ""),
            status=body.get("status"),
        )
        return ok({"id": machine_id}, status=201, message="Machine created successfully")
