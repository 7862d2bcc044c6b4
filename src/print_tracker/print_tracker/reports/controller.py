from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.http import admin_required, ok
from ..container import Container
from .exporters import render_excel, render_jobs_csv

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    def _report_date() -> date:
        value = request.args.get("date")
        return parse_iso_date(value) if value else today_local()

    def _attachment(payload: bytes, *, mimetype: str, filename: str):
        return app.response_class(
            payload,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/reports/daily", methods=["GET"], endpoint="report_daily")
    @admin_required
    def report_daily():
        return ok(container.report_service.get_daily_summary(_report_date()))

    @app.route("/api/admin/reports/machines", methods=["GET"], endpoint="report_machines")
    @admin_required
    def report_machines():
        return ok(container.report_service.get_machine_summary(_report_date()))

    @app.route("/api/admin/reports/workers", methods=["GET"], endpoint="report_workers")
    @admin_required
    def report_workers():
        return ok(container.report_service.get_worker_summary(_report_date()))

    @app.route("/api/admin/reports/job-types", methods=["GET"], endpoint="report_job_types")
    @admin_required
    def report_job_types():
        return ok(container.report_service.get_job_type_summary(_report_date()))

    @app.route("/api/admin/reports/jobs", methods=["GET"], endpoint="report_jobs")
    @admin_required
    def report_jobs():
        return ok(container.report_service.get_detailed_jobs(_report_date()))

    @app.route("/api/admin/reports/export.xlsx", methods=["GET"], endpoint="report_export_excel")
    @admin_required
    def report_export_excel():
        day = _report_date()
        report = container.report_service.build_daily_report(day)
        return _attachment(render_excel(report), mimetype=XLSX_MIMETYPE, filename=f"report-{day.isoformat()}.xlsx")

    @app.route("/api/admin/reports/export.csv", methods=["GET"], endpoint="report_export_csv")
    @admin_required
    def report_export_csv():
        day = _report_date()
        report = container.report_service.build_daily_report(day)
        return _attachment(render_jobs_csv(report), mimetype="text/csv", filename=f"jobs-{day.isoformat()}.csv")
