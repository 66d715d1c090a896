"""Uniform error bodies for framework-level API errors.

DRF raises authentication, permission, parse, throttling and serializer
validation errors; this handler reshapes them into::

    {"type": "validation_error", "errors": [{"code", "detail", "attr"}]}

Domain errors are translated by the views themselves and keep the plain
``{"detail": ...}`` body.
"""

from __future__ import annotations

from typing import Any

import structlog
from rest_framework import exceptions
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


def standard_exception_handler(exc: Exception, context: dict[str, Any]):
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        error_type = "validation_error"
    elif response.status_code >= 500:
        error_type = "server_error"
    else:
        error_type = "client_error"

    errors = _flatten(exc.get_full_details() if isinstance(exc, exceptions.APIException) else {})
    response.data = {"type": error_type, "errors": errors}

    logger.info(
        "api.error",
        error_type=error_type,
        status_code=response.status_code,
        codes=[error["code"] for error in errors],
    )
    return response


def _flatten(details: Any, attr: str | None = None) -> list[dict[str, Any]]:
    """Turn DRF's nested ``get_full_details()`` into a flat error list."""
    if isinstance(details, dict) and "message" in details and "code" in details:
        return [{"code": details["code"], "detail": details["message"], "attr": attr}]
    if isinstance(details, dict):
        flat: list[dict[str, Any]] = []
        for key, value in details.items():
            child = key if key != "non_field_errors" else None
            if attr and child:
                child = f"{attr}.{child}"
            flat.extend(_flatten(value, child or attr))
        return flat
    if isinstance(details, list):
        flat = []
        for index, value in enumerate(details):
            child = attr
            if isinstance(value, dict) and "message" not in value and attr:
                child = f"{attr}.{index}"
            flat.extend(_flatten(value, child))
        return flat
    return [{"code": "error", "detail": str(details), "attr": attr}]
