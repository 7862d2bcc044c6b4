from __future__ import annotations

from datetime import datetime, timezone

from flask import Flask, g, request

from ..core.enums import LimitCategory
from ..core.exceptions import ClientBlockedError, RateLimitedError
from .rate_limiter import RateLimiter

_MUTATING = {"POST", "PUT", "PATCH", "DELETE"}
_UNTHROTTLED = {"/api/health"}


def category_for(path: str, method: str) -> LimitCategory:
    if path == "/api/auth/login":
        return LimitCategory.LOGIN
    if path.startswith("/api/admin/") and method.upper() in _MUTATING:
        return LimitCategory.STRICT
    return LimitCategory.API


def client_identifier() -> str:
    return request.remote_addr or "unknown"


def register_rate_limiting(app: Flask, limiter: RateLimiter) -> None:
    """Throttle every /api request; rejections never reach the view.

    Rejections are raised as security errors and rendered as 429 with
    ``Retry-After`` by the shared error handlers.
    """

    @app.before_request
    def _throttle():
        path = request.path
        if not path.startswith("/api/") or path in _UNTHROTTLED:
            return None

        identifier = client_identifier()
        decision = limiter.hit(identifier, category_for(path, request.method))
        g.rate_decision = decision
        if decision.allowed:
            return None

        if decision.blocked:
            raise ClientBlockedError(identifier, decision.retry_after)
        raise RateLimitedError(decision.retry_after)

    @app.after_request
    def _rate_headers(response):
        decision = g.pop("rate_decision", None)
        if decision is not None and decision.allowed:
            reset = datetime.fromtimestamp(decision.reset_at, tz=timezone.utc)
            response.headers["X-RateLimit-Limit"] = str(decision.limit)
            response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
            response.headers["X-RateLimit-Reset"] = reset.isoformat().replace("+00:00", "Z")
        return response
