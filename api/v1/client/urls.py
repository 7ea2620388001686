"""
URL configuration for client API endpoints.
"""

from django.urls import path

from api.v1.client import views

app_name = "client"

urlpatterns = [
    path("activate", views.ActivateDeviceView.as_view(), name="activate-device"),
    path("validate", views.ValidateDeviceView.as_view(), name="validate-device"),
    path("files/<uuid:file_id>", views.DownloadFileView.as_view(), name="download-file"),
]
