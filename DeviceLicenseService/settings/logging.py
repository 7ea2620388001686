"""
Logging configuration for structured JSON logging.
"""

import sys

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

APP_LOGGERS = ("core", "api", "admins", "licenses", "products", "activations")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that adds the active trace context."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record["trace_id"] = format(span_context.trace_id, "032x")
            log_record["span_id"] = format(span_context.span_id, "016x")


def get_logging_config(environment: str = "development") -> dict:
    """
    Get logging configuration for the application.

    Args:
        environment: Environment name (development, production, test)

    Returns:
        Django logging configuration dictionary
    """
    log_level = "DEBUG" if environment == "development" else "INFO"

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d",
            },
            "verbose": {
                "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": log_level,
        },
        "loggers": {
            "django": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
            "django.request": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
            "django.db.backends": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }
    for name in APP_LOGGERS:
        config["loggers"][name] = {
            "handlers": ["console"],
            "level": log_level,
            "propagate": False,
        }
    return config
