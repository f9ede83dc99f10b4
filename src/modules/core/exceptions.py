"""DRF exception handler producing a uniform error payload.

Views translate the expected domain errors themselves.  This handler
covers everything that escapes them: framework errors (malformed JSON,
unsupported media type, unknown method) and any domain error a view did
not anticipate.  Every error body has the same shape::

    {
        "type": "validation_error",
        "errors": [{"code": "parse_error", "detail": "...", "attr": null}]
    }
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.domain.exceptions import ConflictError, DomainError, InvalidArgument, NotFound

logger = structlog.get_logger(__name__)

_DOMAIN_STATUS = (
    (InvalidArgument, status.HTTP_400_BAD_REQUEST, "validation_error"),
    (NotFound, status.HTTP_404_NOT_FOUND, "client_error"),
    (ConflictError, status.HTTP_409_CONFLICT, "client_error"),
)


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """Entry point configured as ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``."""
    if isinstance(exc, DomainError):
        return _domain_error_response(exc)

    response = exception_handler(exc, context)
    if response is None:
        return None

    error_type = (
        "validation_error"
        if isinstance(exc, (exceptions.ValidationError, exceptions.ParseError))
        else "client_error"
    )
    response.data = {
        "type": error_type,
        "errors": _flatten(response.data, default_code=_code_of(exc)),
    }
    return response


def _domain_error_response(exc: DomainError) -> Response:
    for error_class, http_status, error_type in _DOMAIN_STATUS:
        if isinstance(exc, error_class):
            break
    else:
        http_status, error_type = status.HTTP_400_BAD_REQUEST, "client_error"

    logger.warning(
        "api.domain_error",
        error=exc.__class__.__name__,
        status_code=http_status,
    )
    return Response(
        {
            "type": error_type,
            "errors": [
                {"code": exc.__class__.__name__, "detail": str(exc), "attr": None}
            ],
        },
        status=http_status,
    )


def _code_of(exc: Exception) -> str:
    if isinstance(exc, exceptions.APIException):
        return str(exc.default_code)
    return "error"


def _flatten(
    data: Any, default_code: str, attr: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Turn DRF's nested error data into a flat list of error entries."""
    if isinstance(data, dict):
        if set(data) == {"detail"}:
            return _flatten(data["detail"], default_code, attr)
        errors: List[Dict[str, Any]] = []
        for key, value in data.items():
            name = f"{attr}.{key}" if attr else str(key)
            errors.extend(_flatten(value, default_code, name))
        return errors
    if isinstance(data, list):
        errors = []
        for item in data:
            errors.extend(_flatten(item, default_code, attr))
        return errors
    code = getattr(data, "code", None) or default_code
    return [{"code": code, "detail": str(data), "attr": attr}]
