from __future__ import annotations

from flask import Flask, request, session

from ..audit.middleware import audit_action
from ..common.datetime_utils import parse_iso_date
from ..common.http import current_user_id, json_body, ok, worker_required
from ..common.validators import parse_optional_int
from ..core.constants import DEFAULT_PAGE_LIMIT
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/jobs", methods=["POST"], endpoint="create_job")
    @worker_required
    @audit_action("job_create")
    def create_job():
        body = json_body()
        created = container.job_service.create_job(
            worker_id=current_user_id(),
            machine_id=session.get("machine_id"),
            job_type_id=body.get("job_type_id"),
            description=body.get("description"),
            dimensions={
                "width_cm": body.get("width_cm"),
                "height_cm": body.get("height_cm"),
                "quantity": body.get("quantity"),
            },
            manual_rate=body.get("rate"),
        )
        return ok(created, status=201, message="Job created successfully")

    @app.route("/api/jobs", methods=["GET"], endpoint="my_jobs")
    @worker_required
    def my_jobs():
        start_s = request.args.get("start_date") or request.args.get("startDate")
        end_s = request.args.get("end_date") or request.args.get("endDate")
        limit = parse_optional_int(request.args.get("limit"), "limit")
        offset = parse_optional_int(request.args.get("offset"), "offset")

        page = container.job_service.list_worker_jobs(
            worker_id=current_user_id(),
            start=parse_iso_date(start_s) if start_s and end_s else None,
            end=parse_iso_date(end_s) if start_s and end_s else None,
            limit=DEFAULT_PAGE_LIMIT if limit is None else limit,
            offset=offset or 0,
            sort=request.args.get("sort", "created_at"),
            order=request.args.get("order", "desc"),
        )
        return ok(
            {
                "jobs": page.jobs,
                "pagination": {
                    "total": page.total,
                    "limit": page.limit,
                    "offset": page.offset,
                    "has_more": page.has_more,
                },
            }
        )

    @app.route("/api/jobs/daily-total", methods=["GET"], endpoint="my_daily_total")
    @worker_required
    def my_daily_total():
        day_s = request.args.get("date")
        total = container.job_service.worker_daily_total(
            worker_id=current_user_id(),
            day=parse_iso_date(day_s) if day_s else None,
        )
        return ok(total)

    @app.route("/api/jobs/job-types", methods=["GET"], endpoint="my_job_types")
    @worker_required
    def my_job_types():
        return ok(container.job_service.job_types_for_machine(session.get("machine_id")))
