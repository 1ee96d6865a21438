from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from flask import jsonify, request

from ..core.exceptions import (
    ConcurrencyConflictError,
    DomainError,
    InconsistencyError,
    InfrastructureError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from .money import round_money

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvalidStateError, 409),
    (ConcurrencyConflictError, 409),
    (InconsistencyError, 422),
    (InfrastructureError, 503),
)


def status_for(exc: Exception) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def to_jsonable(value: Any) -> Any:
    """Dataclasses, Decimals, dates and enums into plain JSON values (money as 2-decimal floats)."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, Decimal):
        return float(round_money(value))
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def json_body() -> dict:
    """Request JSON as a dict; a missing body is empty, anything but an object is rejected."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def ok(data: Any = None, status: int = 200):
    return jsonify({"success": True, "data": to_jsonable(data)}), status


def error_response(exc: Exception):
    status = status_for(exc)
    body: dict[str, Any] = {"success": False, "message": str(exc)}
    if isinstance(exc, ValidationError):
        body["errors"] = list(exc.violations)
    if status >= 500:
        logger.error("Request failed: %s", exc)
    elif not isinstance(exc, DomainError):
        logger.warning("Request failed: %s", exc)
    return jsonify(body), status
