"""
Django admin configuration for core app.
"""
import json

from django.contrib import admin
from django.utils.html import format_html

from core.infrastructure.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Admin interface for AuditLog model."""

    list_display = ["action", "entity_type", "entity_id", "actor", "created_at"]
    list_filter = ["action", "entity_type", "created_at"]
    search_fields = ["actor", "entity_id"]
    readonly_fields = ["id", "entity_type", "entity_id", "action", "actor", "details_display", "created_at"]
    exclude = ["details"]

    def details_display(self, obj):
        """Display details in a formatted way."""
        if obj.details:
            return format_html(
                '<pre style="background: #f5f5f5; padding: 10px; '
                'border-radius: 4px; overflow-x: auto;">{}</pre>',
                json.dumps(obj.details, indent=2),
            )
        return "-"

    details_display.short_description = "Details"

    def has_add_permission(self, request):
        """Audit logs are read-only."""
        return False

    def has_change_permission(self, request, obj=None):
        """Audit logs are read-only."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Audit logs should not be deleted."""
        return False
