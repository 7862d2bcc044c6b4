from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, ok
from ..common.validators import parse_optional_int
from ..core.constants import DEFAULT_PAGE_LIMIT
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/audit-logs", methods=["GET"], endpoint="audit_logs")
    @admin_required
    def audit_logs():
        args = request.args
        start_s = args.get("start_date") or args.get("startDate")
        end_s = args.get("end_date") or args.get("endDate")
        limit = parse_optional_int(args.get("limit"), "limit")
        entries = container.audit_service.list_entries(
            user_id=parse_optional_int(args.get("user_id") or args.get("userId"), "user_id"),
            action=args.get("action"),
            start=parse_iso_date(start_s) if start_s else None,
            end=parse_iso_date(end_s) if end_s else None,
            limit=DEFAULT_PAGE_LIMIT if limit is None else limit,
            offset=parse_optional_int(args.get("offset"), "offset") or 0,
        )
        return ok(entries)
