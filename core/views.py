"""
Core views for health checks and system status.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)

SERVICE_NAME = "device-license-service"


def check_database() -> bool:
    """Run a trivial query against the default database."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return True
    except DatabaseError as e:
        logger.warning("Database health check failed: %s", e)
        return False


def check_cache() -> bool:
    """Round-trip a value through the default cache."""
    try:
        cache.set("health_check", "ok", 10)
        return cache.get("health_check") == "ok"
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.warning("Cache health check failed: %s", e)
        return False


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Liveness endpoint."""

    def get(self, _request):
        return JsonResponse({"status": "healthy", "service": SERVICE_NAME})


@method_decorator(csrf_exempt, name="dispatch")
class HealthDBView(View):
    """Database health check endpoint."""

    def get(self, _request):
        if check_database():
            return JsonResponse({"status": "healthy", "database": "connected"})
        return JsonResponse({"status": "unhealthy", "database": "disconnected"}, status=503)


@method_decorator(csrf_exempt, name="dispatch")
class HealthCacheView(View):
    """Cache health check endpoint."""

    def get(self, _request):
        if check_cache():
            return JsonResponse({"status": "healthy", "cache": "connected"})
        return JsonResponse({"status": "unhealthy", "cache": "disconnected"}, status=503)


@method_decorator(csrf_exempt, name="dispatch")
class ReadyView(View):
    """Readiness check endpoint."""

    def get(self, _request):
        """Ready when both the database and the cache respond."""
        checks = {"database": check_database(), "cache": check_cache()}
        ready = all(checks.values())
        return JsonResponse(
            {"status": "ready" if ready else "not_ready", "checks": checks},
            status=200 if ready else 503,
        )
