from __future__ import annotations

from flask import jsonify

from ..core.exceptions import (
    AuthorizationError,
    ConfigError,
    DomainError,
    NotFoundError,
    PartialBatchFailure,
    StoreError,
    ValidationError,
)

# Most specific first.
_ERROR_MAP: tuple[tuple[type[DomainError], str, int], ...] = (
    (ValidationError, "ERR_VALIDATION", 400),
    (AuthorizationError, "ERR_FORBIDDEN", 403),
    (NotFoundError, "ERR_NOT_FOUND", 404),
    (ConfigError, "ERR_CONFIG", 409),
    (PartialBatchFailure, "ERR_PARTIAL_BATCH", 207),
    (StoreError, "ERR_STORE_UNAVAILABLE", 503),
)


def error_response(exc: DomainError):
    for kind, code, status in _ERROR_MAP:
        if isinstance(exc, kind):
            return jsonify({"code": code, "message": str(exc)}), status
    return jsonify({"code": "ERR_DOMAIN", "message": str(exc)}), 400


def unauthorized():
    return jsonify({"code": "ERR_UNAUTHORIZED", "message": "Not authenticated"}), 401
