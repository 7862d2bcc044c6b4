"""Shared JSON helpers for the thin Flask controllers."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleViolation,
    ConnectionFailure,
    DataAccessError,
    DomainError,
    DuplicateKeyError,
    MissingReferenceError,
    NotFoundError,
    SecurityGateError,
    ValidationError,
)
from ..core.logging_config import get_logger, get_security_logger

logger = get_logger(__name__)
security_log = get_security_logger()


def jsonable(value: Any) -> Any:
    """Dataclasses, enums, Decimals and datetimes to plain JSON values.

    Money stays exact: Decimals are emitted as strings such as ``"100.00"``.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    return value


def ok(data: Any = None, *, status: int = 200, message: Optional[str] = None, **extra):
    body: dict = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = jsonable(data)
    body.update({k: jsonable(v) for k, v in extra.items()})
    return jsonify(body), status


def fail(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def client_ip() -> str:
    return request.remote_addr or "unknown"


def current_user_id() -> Optional[int]:
    uid = session.get("user_id")
    return int(uid) if uid is not None else None


def current_role() -> Optional[Role]:
    role = session.get("role")
    return Role(role) if role else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Authentication required", 401)
        if session.get("role") != Role.ADMIN.value:
            return fail("Insufficient permissions", 403)
        return view(*args, **kwargs)

    return wrapper


def worker_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Authentication required", 401)
        if session.get("role") != Role.WORKER.value:
            return fail("Insufficient permissions", 403)
        return view(*args, **kwargs)

    return wrapper


def status_for(exc: DomainError) -> int:
    if isinstance(exc, SecurityGateError):
        return 429
    if isinstance(exc, DuplicateKeyError):
        return 409
    if isinstance(exc, MissingReferenceError):
        return 400
    if isinstance(exc, (ValidationError, BusinessRuleViolation)):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, AuthorizationError):
        return 403
    if isinstance(exc, ConnectionFailure):
        return 503
    return 500


def register_error_handlers(app: Flask) -> None:
    """Translate domain exceptions raised by services into JSON responses."""

    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        status = status_for(exc)
        if isinstance(exc, SecurityGateError):
            security_log.warning("%s: %s path=%s ip=%s", type(exc).__name__, exc, request.path, client_ip())
            retry_after = exc.details.get("retry_after")
            if retry_after is None and exc.details.get("minutes_remaining"):
                retry_after = int(exc.details["minutes_remaining"]) * 60
            if retry_after is None:
                return fail(exc.message, status)
            resp, _ = fail(exc.message, status, retryAfter=retry_after)
            resp.headers["Retry-After"] = str(retry_after)
            return resp, status

        if isinstance(exc, DataAccessError) and status >= 500:
            logger.error("Database error on %s %s: %s details=%s", request.method, request.path, exc, exc.details)
            message = "Database connection failed" if isinstance(exc, ConnectionFailure) else "Internal Server Error"
            return fail(message, status)

        logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.path, exc)
        extra = {"field": exc.field} if isinstance(exc, ValidationError) and exc.field else {}
        if isinstance(exc.details.get("errors"), list):
            extra["errors"] = exc.details["errors"]
        return fail(exc.message, status, **extra)

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return fail(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return fail(f"Internal Server Error: {exc}", 500)
        return fail("Internal Server Error", 500)
