"""
Observability middleware.

Tags every request with a correlation ID, writes one structured log line
per request and links it to the active OpenTelemetry trace. Health probes
are logged at debug level only.
"""

import logging
import time
import uuid
from typing import Callable, Dict, Optional

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

_AREAS = (
    ("/api/v1/client/", "client"),
    ("/api/v1/admin/", "admin"),
    ("/health/", "health"),
    ("/ready/", "health"),
)


def request_area(path: str) -> str:
    """Which surface of the service a path belongs to."""
    for prefix, area in _AREAS:
        if path.startswith(prefix):
            return area
    return "other"


def trace_fields() -> Dict[str, str]:
    """IDs of the current span, or nothing when tracing is off."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {
        "trace_id": format_trace_id(span_context.trace_id),
        "span_id": format_span_id(span_context.span_id),
    }


class ObservabilityMiddleware:
    """
    Middleware for request observability.

    The correlation ID is taken from the X-Correlation-ID header when the
    caller sends one and echoed back on the response.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore

        area = request_area(request.path)
        log_extra = {
            "correlation_id": correlation_id,
            "area": area,
            "method": request.method,
            "path": request.path,
            "remote_addr": request.META.get("REMOTE_ADDR"),
            **trace_fields(),
        }
        start_time = time.monotonic()

        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    **log_extra,
                    "error_type": type(e).__name__,
                    "duration_ms": self._elapsed_ms(start_time),
                },
                exc_info=True,
            )
            raise

        log_extra.update(
            status_code=response.status_code,
            duration_ms=self._elapsed_ms(start_time),
        )
        admin_id = self._admin_id(request)
        if admin_id:
            log_extra["admin_id"] = admin_id
        error_code = getattr(response, "data", None)
        if isinstance(error_code, dict) and isinstance(error_code.get("error"), dict):
            log_extra["error_code"] = error_code["error"].get("code")

        if area == "health" and response.status_code < 500:
            logger.debug("Health probe", extra=log_extra)
        elif response.status_code >= 500:
            logger.error("Request completed with server error", extra=log_extra)
        elif response.status_code >= 400:
            logger.warning("Request completed with client error", extra=log_extra)
        else:
            logger.info("Request completed", extra=log_extra)

        response[CORRELATION_HEADER] = correlation_id
        if "trace_id" in log_extra:
            response["X-Trace-ID"] = log_extra["trace_id"]
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.monotonic() - start_time) * 1000, 2)

    @staticmethod
    def _admin_id(request: HttpRequest) -> Optional[str]:
        admin = getattr(request, "admin", None)
        return str(admin.id) if admin is not None else None
