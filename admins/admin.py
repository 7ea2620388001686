"""
Django admin configuration for admins app.
"""

from django.contrib import admin

from admins.infrastructure.models import Admin, AdminApiToken, AdminResourceScope


class AdminResourceScopeInline(admin.TabularInline):
    model = AdminResourceScope
    extra = 0


@admin.register(Admin)
class AdminAccountAdmin(admin.ModelAdmin):
    """Admin interface for Admin model."""

    list_display = ["username", "email", "role", "created_at"]
    list_filter = ["role"]
    search_fields = ["username", "email"]
    readonly_fields = ["id", "password", "created_at", "updated_at"]
    inlines = [AdminResourceScopeInline]


@admin.register(AdminApiToken)
class AdminApiTokenAdmin(admin.ModelAdmin):
    """Admin interface for AdminApiToken model. Tokens are issued by create_admin."""

    list_display = ["admin", "key_prefix", "expires_at", "last_used_at", "created_at"]
    readonly_fields = ["id", "admin", "key_prefix", "key_hash", "created_at", "last_used_at"]

    def has_add_permission(self, request):
        return False
