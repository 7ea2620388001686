"""
OpenTelemetry instrumentation setup.

This module configures OpenTelemetry for distributed tracing
and starts the Prometheus metrics endpoint.
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Status, StatusCode  # noqa: F401
from prometheus_client import start_http_server

logger = logging.getLogger(__name__)


def setup_opentelemetry():
    """
    Configure OpenTelemetry instrumentation.

    Sets up:
    - Distributed tracing (exported via OTLP)
    - Prometheus metrics server
    - Auto-instrumentation for Django, PostgreSQL, Redis
    """
    resource = Resource.create(
        {
            "service.name": os.environ.get("OTEL_SERVICE_NAME", "device-license-service"),
            "service.version": os.environ.get("OTEL_SERVICE_VERSION", "1.0.0"),
            "deployment.environment": os.environ.get("ENVIRONMENT", "development"),
        }
    )

    trace_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(trace_provider)

    otlp_endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT", "http://tempo:4317")
    otlp_exporter = OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)
    trace_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    DjangoInstrumentor().instrument()
    Psycopg2Instrumentor().instrument()
    RedisInstrumentor().instrument()

    prometheus_port = int(os.environ.get("PROMETHEUS_PORT", "9090"))
    try:
        start_http_server(prometheus_port, addr="0.0.0.0")
        logger.info("Prometheus metrics server started on 0.0.0.0:%s", prometheus_port)
    except OSError as e:
        logger.warning("Could not start Prometheus metrics server: %s", e)

    logger.info("OpenTelemetry instrumentation configured")


def get_tracer(name: str):
    """
    Get a tracer instance for manual instrumentation.

    Without a configured provider this returns a no-op tracer.

    Args:
        name: Tracer name (usually module name)

    Returns:
        Tracer instance
    """
    return trace.get_tracer(name)
