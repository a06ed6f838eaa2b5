from __future__ import annotations

import logging

from flask import jsonify, request

from ..core.exceptions import (
    DomainError,
    EmployeeNotFoundError,
    NoMatchError,
    PairingViolation,
    PersistenceError,
    TooSoon,
    ValidationError,
)

logger = logging.getLogger(__name__)


def status_for(error: DomainError) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NoMatchError):
        return 401
    if isinstance(error, EmployeeNotFoundError):
        return 404
    if isinstance(error, PairingViolation):
        return 400
    return 500


def error_response(error: DomainError):
    """JSON error body: who-you-are / what-you-do / how-you-asked failures keep distinct codes."""

    status = status_for(error)
    body = {"success": False, "error": str(error), "code": error.code}
    if isinstance(error, TooSoon):
        body["retryAfterSeconds"] = error.retry_after_seconds
    if isinstance(error, PersistenceError):
        logger.exception("Persistence failure on %s %s", request.method, request.path)
        body["error"] = "Storage failure, the request may or may not have been recorded"
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
