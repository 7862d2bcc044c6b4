from __future__ import annotations

from functools import wraps

from flask import Flask, g, request, session

from ..common.http import client_ip
from .service import AuditService


def audit_action(action: str):
    """Mark a view so its successful (2xx) responses are written to the audit trail."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.audit_action = action
            g.audit_user_id = session.get("user_id")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_audit_logging(app: Flask, audit: AuditService) -> None:
    @app.after_request
    def _audit(response):
        action = g.pop("audit_action", None)
        if action is None or not 200 <= response.status_code < 300:
            return response

        user_id = session.get("user_id", g.pop("audit_user_id", None))
        audit.record(
            action=action,
            user_id=int(user_id) if user_id is not None else None,
            ip_address=client_ip(),
            user_agent=request.headers.get("User-Agent"),
            details={
                "method": request.method,
                "path": request.path,
                "body": request.get_json(silent=True) or {},
                "query": request.args.to_dict(),
                "params": dict(request.view_args or {}),
            },
        )
        return response
