"""
App configuration for Device License Service.
"""

import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class DeviceLicenseServiceConfig(AppConfig):
    """App configuration for DeviceLicenseService."""

    name = "DeviceLicenseService"
    verbose_name = "Device License Service"

    def ready(self):
        """Called when Django starts."""
        self.register_event_handlers()

        # Only setup once (Django's reloader imports apps twice)
        if getattr(self, "_initialized", False):
            return
        if settings.OBSERVABILITY_ENABLED:
            self.setup_observability()
        self._initialized = True

    def setup_observability(self):
        """Setup observability after apps are ready."""
        try:
            from core.instrumentation import setup_opentelemetry

            setup_opentelemetry()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to setup OpenTelemetry: %s", e)

    def register_event_handlers(self):
        """Register event handlers after apps are ready."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
