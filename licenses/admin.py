"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "license_key",
        "product_name",
        "customer_email",
        "status_display",
        "max_devices",
        "active_devices",
        "expires_at",
        "created_at",
    ]
    list_filter = ["status", "expires_at", "created_at"]
    search_fields = ["license_key", "customer_name", "customer_email", "product_name"]
    readonly_fields = ["id", "license_key", "active_devices", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "license_key", "product", "product_name", "policy", "status"),
            },
        ),
        (
            "Customer",
            {
                "fields": ("customer_name", "customer_email", "notes"),
            },
        ),
        (
            "Devices",
            {
                "fields": ("max_devices", "active_devices"),
            },
        ),
        (
            "Expiration",
            {
                "fields": ("expires_at",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("owner", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {"active": "green", "revoked": "red", "expired": "gray"}
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.status, "black"),
            obj.status.upper(),
        )

    status_display.short_description = "Status"

    def active_devices(self, obj):
        """Display number of active device activations."""
        return obj.device_activations.filter(status="active").count()

    active_devices.short_description = "Active Devices"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("product", "policy", "owner")
