"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

app_name = "admin_api"

urlpatterns = [
    path("licenses", views.LicenseListView.as_view(), name="licenses"),
    path("licenses/<uuid:license_id>", views.LicenseDetailView.as_view(), name="license-detail"),
    path(
        "licenses/<uuid:license_id>/revoke",
        views.RevokeLicenseView.as_view(),
        name="revoke-license",
    ),
    path(
        "licenses/<uuid:license_id>/devices",
        views.LicenseDevicesView.as_view(),
        name="license-devices",
    ),
    path(
        "licenses/<uuid:license_id>/logs",
        views.LicenseLogsView.as_view(),
        name="license-logs",
    ),
    path("devices/cleanup", views.CleanupDevicesView.as_view(), name="cleanup-devices"),
    path("devices/<uuid:device_id>", views.DeviceDetailView.as_view(), name="device-detail"),
    path(
        "devices/<uuid:device_id>/deactivate",
        views.DeactivateDeviceView.as_view(),
        name="deactivate-device",
    ),
    path(
        "devices/<uuid:device_id>/reactivate",
        views.ReactivateDeviceView.as_view(),
        name="reactivate-device",
    ),
    path(
        "devices/<uuid:device_id>/logs",
        views.DeviceLogsView.as_view(),
        name="device-logs",
    ),
    path(
        "admins/<uuid:admin_id>/permissions",
        views.AdminPermissionsView.as_view(),
        name="admin-permissions",
    ),
    path(
        "admins/<uuid:admin_id>/scopes/<str:resource_type>",
        views.AdminScopeView.as_view(),
        name="admin-scope",
    ),
]
