"""
API exception handlers.

This module maps the domain error taxonomy onto HTTP responses. Every
error body has the shape ``{"error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.db import DatabaseError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    ConflictError,
    DomainException,
    ExpiredError,
    ForbiddenError,
    InternalError,
    InvalidInputError,
    NotFoundError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

# Checked in order; the first matching base wins
DOMAIN_STATUS_CODES = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ExpiredError, status.HTTP_403_FORBIDDEN),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (InternalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def error_body(code: str, message: Any) -> Dict[str, Any]:
    return {"error": {"code": code, "message": message}}


def status_for(exc: DomainException) -> int:
    """HTTP status code for a domain exception."""
    for base, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, base):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, context, trace_id)
    elif isinstance(exc, ValidationError):
        response = Response(
            error_body("VALIDATION_ERROR", exc.detail), status=status.HTTP_400_BAD_REQUEST
        )
    elif isinstance(exc, Http404):
        response = Response(
            error_body("NOT_FOUND", "Resource not found"), status=status.HTTP_404_NOT_FOUND
        )
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = str(exc.default_code).upper().replace("-", "_")
        message = response.data.get("detail", exc.default_detail)
        response.data = error_body(code, message)
    else:
        response = _handle_unexpected_exception(exc, context, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _endpoint(context: Dict[str, Any]) -> str:
    view = context.get("view")
    return view.__class__.__name__ if view is not None else "unknown"


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for(exc)
    errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()
    if status_code >= 500:
        logger.error("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    return Response(error_body(exc.code, exc.message), status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    code = "STORAGE_ERROR" if isinstance(exc, DatabaseError) else "INTERNAL_ERROR"
    errors_total.labels(error_type=code, endpoint=_endpoint(context)).inc()
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return Response(
        error_body(code, "An internal error occurred"),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
