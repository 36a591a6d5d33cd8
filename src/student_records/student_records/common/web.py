from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthFailure,
    AuthorizationError,
    DomainError,
    IndexRequired,
    ProfileNotFound,
    StoreError,
    ValidationError,
)
from ..records.model import Principal

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthFailure, 401),
    (AuthorizationError, 403),
    (ProfileNotFound, 404),
    (IndexRequired, 503),
    (StoreError, 502),
)


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True, "data": data}
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def payload() -> dict:
    """Request body as a dict, from JSON or form data."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def session_principal() -> Principal | None:
    if "principal_id" not in session or "role" not in session:
        return None
    return Principal(
        principal_id=str(session["principal_id"]),
        role=Role(session["role"]),
        name=session.get("name", ""),
        email=session.get("email", ""),
    )


def remember_principal(principal: Principal) -> None:
    session["role"] = principal.role.value
    session["name"] = principal.name
    session["email"] = principal.email


def forget_principal() -> None:
    for key in ("role", "name", "email"):
        session.pop(key, None)


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            principal = session_principal()
            if principal is None:
                return fail("Please sign in to continue", 401)
            if principal.role != role:
                return fail("You do not have access to this page", 403)
            return view(principal, *args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls)), 400)
        if status >= 500:
            logger.exception("Request %s %s failed", request.method, request.path)
        # Every failed load is offered a retry.
        retryable = bool(getattr(e, "retryable", False)) or (isinstance(e, StoreError) and request.method == "GET")
        return fail(str(e), status, error=type(e).__name__, retryable=retryable)
