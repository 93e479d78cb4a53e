"""HTTP helpers shared by feature controllers.

Controllers stay thin: they resolve the principal from the session, parse the
JSON body, call one service method and serialize the result. Domain errors are
translated to status codes in one place (see ``register_error_handlers``).
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..core.principal import Principal

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def status_for(error: DomainError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def current_principal() -> Principal:
    """Build the principal from the signed session cookie."""
    if "user_id" not in session:
        raise AuthenticationError("Please log in to continue")
    try:
        role = Role(session.get("role"))
    except ValueError:
        raise AuthorizationError("Invalid role")
    return Principal(user_id=int(session["user_id"]), role=role)


def principal_required(*roles: Role):
    """Resolve the principal and pass it to the view as ``principal``.

    With no roles given any authenticated role is accepted.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            principal = current_principal()
            if roles:
                principal.require(*roles)
            return view(*args, principal=principal, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 409:
            logger.warning("%s %s rejected: %s", request.method, request.path, error)
        return jsonify({"message": str(error)}), status

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": "Internal server error"}), 500
