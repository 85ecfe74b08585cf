"""API error formatting.

Domain modules raise subclasses of ``DomainError``; the DRF exception
handler below turns them, and DRF's own API exceptions, into the single
error shape the API exposes::

    {"error": "<human readable message>"}
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Business rule violation that maps onto an HTTP status."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def api_exception_handler(exc: Exception, context: dict) -> Optional[Response]:
    """``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.

    Returns ``None`` for anything that is neither a ``DomainError`` nor a
    DRF ``APIException`` so Django reports it as a server error.
    """
    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            error=type(exc).__name__,
            status_code=exc.status_code,
            message=exc.message,
        )
        return Response({"error": exc.message}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        response.data = {"error": _flatten(response.data)}
    return response


def _flatten(data: Any) -> str:
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        return "; ".join(f"{key}: {_flatten(value)}" for key, value in data.items())
    if isinstance(data, list):
        return "; ".join(_flatten(item) for item in data)
    return str(data)
