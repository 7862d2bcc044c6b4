from __future__ import annotations

from flask import Flask, request

from ..audit.middleware import audit_action
from ..common.http import admin_required, json_body, ok
from ..common.validators import parse_bool, parse_optional_int
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/pricing", methods=["GET"], endpoint="list_pricing")
    @admin_required
    def list_pricing():
        job_type_id = parse_optional_int(request.args.get("job_type_id"), "job_type_id")
        if job_type_id is not None:
            return ok(container.pricing_service.list_for_job_type(job_type_id))
        return ok(container.pricing_service.list_pricing())

    @app.route("/api/admin/pricing", methods=["POST"], endpoint="create_pricing")
    @admin_required
    @audit_action("pricing_create")
    def create_pricing():
        body = json_body()
        job_type_id = parse_optional_int(body.get("job_type_id"), "job_type_id")
        if job_type_id is None or body.get("rate") is None:
            raise ValidationError("Job type and rate are required")

        pricing_id = container.pricing_service.create_pricing(
            job_type_id=job_type_id,
            rate=body.get("rate"),
            rate_unit=body.get("rate_unit"),
            active=parse_bool(body.get("active", True)),
        )
        return ok({"id": pricing_id}, status=201, message="Pricing created successfully")

    @app.route("/api/admin/pricing/<int:pricing_id>", methods=["PATCH", "PUT"], endpoint="update_pricing")
    @admin_required
    @audit_action("pricing_update")
    def update_pricing(pricing_id: int):
        body = json_body()
        active = parse_bool(body["active"]) if "active" in body else None
        container.pricing_service.update_pricing(pricing_id, rate=body.get("rate"), active=active)
        return ok(message="Pricing updated successfully")

    @app.route("/api/admin/pricing/<int:pricing_id>/deactivate", methods=["POST"], endpoint="deactivate_pricing")
    @admin_required
    @audit_action("pricing_deactivate")
    def deactivate_pricing(pricing_id: int):
        container.pricing_service.deactivate_pricing(pricing_id)
        return ok(message="Pricing deactivated")
