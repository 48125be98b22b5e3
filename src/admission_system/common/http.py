from __future__ import annotations

import codecs
import logging
from typing import Any, Dict, Iterator, Optional

from flask import Flask, jsonify, request

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .csv_source import iter_csv_rows

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreError, 500),
)


def status_for(error: DomainError) -> int:
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(error, kind):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, e)
            message = "Database error"
        else:
            message = str(e)
        return jsonify({"success": False, "message": message}), status


def json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def int_field(body: Dict[str, Any], name: str) -> int:
    value = body.get(name)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def bool_field(body: Dict[str, Any], name: str) -> bool:
    value = body.get(name)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "1", "false", "0"}:
        return value.strip().lower() in {"true", "1"}
    if isinstance(value, int):
        return bool(value)
    raise ValidationError(f"{name} must be a boolean")


def role_field(body: Dict[str, Any], name: str, default: Role) -> Role:
    value = body.get(name)
    if not value:
        return default
    try:
        return Role(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown role: {value!r}")


def uploaded_rows(field: str = "file") -> Iterator[Dict[str, str]]:
    """Rows of the uploaded CSV file, read lazily."""
    upload = request.files.get(field)
    if upload is None or not upload.filename:
        raise ValidationError("No file uploaded")
    # utf-8-sig drops the BOM spreadsheet exports put in front of the header.
    return iter_csv_rows(codecs.iterdecode(upload.stream, "utf-8-sig"))


def actor_from(body: Dict[str, Any], *names: str, default: Optional[str] = None) -> Optional[str]:
    for name in names:
        value = body.get(name)
        if value and str(value).strip():
            return str(value).strip()
    return default
