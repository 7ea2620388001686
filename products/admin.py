"""
Django admin configuration for products app.
"""

from django.contrib import admin

from products.infrastructure.models import FileAsset, Policy, Product, ProductFile


class ProductFileInline(admin.TabularInline):
    model = ProductFile
    extra = 0
    fields = ["file", "label", "sort_order", "is_active", "delivery_url"]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product model."""

    list_display = ["name", "status", "owner", "license_count", "created_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["name", "description"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [ProductFileInline]

    def license_count(self, obj):
        """Display number of licenses for this product."""
        return obj.licenses.count()

    license_count.short_description = "Licenses"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("owner").prefetch_related("licenses")


@admin.register(Policy)
class PolicyAdmin(admin.ModelAdmin):
    """Admin interface for Policy model."""

    list_display = ["policy_name", "product", "owner", "updated_at"]
    search_fields = ["policy_name"]
    readonly_fields = ["id", "created_at", "updated_at"]


@admin.register(FileAsset)
class FileAssetAdmin(admin.ModelAdmin):
    """Admin interface for FileAsset model."""

    list_display = ["original_name", "mime_type", "file_size", "created_at"]
    search_fields = ["original_name", "checksum"]
    readonly_fields = ["id", "storage_path", "file_size", "checksum", "created_at"]
