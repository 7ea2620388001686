"""
Django admin configuration for activations app.
"""

from django.contrib import admin
from django.utils.html import format_html

from activations.infrastructure.models import DeviceActivation


@admin.register(DeviceActivation)
class DeviceActivationAdmin(admin.ModelAdmin):
    """Admin interface for DeviceActivation model."""

    list_display = [
        "license",
        "device_name",
        "fingerprint_display",
        "status_display",
        "activated_at",
        "last_validated_at",
    ]
    list_filter = ["status", "activated_at", "last_validated_at"]
    search_fields = ["device_name", "device_fingerprint", "license__license_key"]
    readonly_fields = [
        "id",
        "device_fingerprint",
        "device_info",
        "activated_at",
        "last_validated_at",
        "deactivated_at",
    ]

    def fingerprint_display(self, obj):
        """Display a shortened fingerprint."""
        return f"{obj.device_fingerprint[:12]}..."

    fingerprint_display.short_description = "Fingerprint"

    def status_display(self, obj):
        """Display status with color coding."""
        color = "green" if obj.status == "active" else "gray"
        return format_html('<span style="color: {};">{}</span>', color, obj.status)

    status_display.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("license")
