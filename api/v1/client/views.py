"""
Client API views.

These endpoints are used by installed clients to:
- Activate a device against a license key
- Validate that a device still holds a slot
- Download product files through signed links
"""

import uuid

from asgiref.sync import async_to_sync
from django.http import FileResponse
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.activate_license import (
    ActivateDeviceCommand,
    ValidateDeviceCommand,
)
from activations.application.services.license_activation_service import (
    LicenseActivationService,
)
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from api.v1.client.serializers import (
    ActivationResponseSerializer,
    LicenseRequestSerializer,
    ValidationResponseSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from products.application.services.file_download_service import FileDownloadService
from products.infrastructure.repositories.django_catalog_repository import (
    DjangoCatalogRepository,
)

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()
_catalog_repo = DjangoCatalogRepository()

tracer = get_tracer(__name__)


def _activation_service() -> LicenseActivationService:
    return LicenseActivationService(
        license_repository=_license_repo,
        activation_repository=_activation_repo,
        catalog_repository=_catalog_repo,
    )


class ActivateDeviceView(APIView):
    """View for activating a device."""

    authentication_classes = []
    permission_classes = []

    @extend_schema(
        operation_id="activate_device",
        summary="Activate Device",
        description=(
            "Bind a device to a license. Activating a device that is already "
            "active returns the same device ID and uses no extra slot."
        ),
        tags=["Client API"],
        request=LicenseRequestSerializer,
        responses={
            200: ActivationResponseSerializer,
            201: ActivationResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License revoked or expired"},
            404: {"description": "License not found"},
            409: {"description": "Maximum number of devices reached"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a device."""
        return async_to_sync(self._handle_activate)(request)

    async def _handle_activate(self, request: Request) -> Response:
        """Async handler for activate device."""
        with tracer.start_as_current_span("activate_device") as span:
            span.set_attribute("operation", "activate_device")

            serializer = LicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            result = await _activation_service().activate(
                ActivateDeviceCommand(
                    license_key=serializer.validated_data["license_key"],
                    device_info=serializer.to_device_info(),
                )
            )

            span.set_attribute("device.id", str(result.device_id))
            span.set_attribute("device.created", result.created)
            span.set_status(Status(StatusCode.OK))
            return Response(
                ActivationResponseSerializer(result, context={"request": request}).data,
                status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
            )


class ValidateDeviceView(APIView):
    """View for validating a device."""

    authentication_classes = []
    permission_classes = []

    @extend_schema(
        operation_id="validate_device",
        summary="Validate Device",
        description="Confirm that a device holds an active slot on a usable license.",
        tags=["Client API"],
        request=LicenseRequestSerializer,
        responses={
            200: ValidationResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License revoked or expired, or device not activated"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Validate a device."""
        return async_to_sync(self._handle_validate)(request)

    async def _handle_validate(self, request: Request) -> Response:
        """Async handler for validate device."""
        with tracer.start_as_current_span("validate_device") as span:
            span.set_attribute("operation", "validate_device")

            serializer = LicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            result = await _activation_service().validate(
                ValidateDeviceCommand(
                    license_key=serializer.validated_data["license_key"],
                    device_info=serializer.to_device_info(),
                )
            )

            span.set_attribute("device.id", str(result.device_id))
            span.set_status(Status(StatusCode.OK))
            return Response(
                ValidationResponseSerializer(result, context={"request": request}).data
            )


class DownloadFileView(APIView):
    """View for downloading a file through a signed link."""

    authentication_classes = []
    permission_classes = []

    @extend_schema(
        operation_id="download_file",
        summary="Download File",
        description="Stream a product file. The link is authorized by its signature only.",
        tags=["Client API"],
        parameters=[
            OpenApiParameter(name="exp", type=int, location=OpenApiParameter.QUERY, required=True),
            OpenApiParameter(name="nonce", type=str, location=OpenApiParameter.QUERY, required=True),
            OpenApiParameter(name="sig", type=str, location=OpenApiParameter.QUERY, required=True),
        ],
        responses={
            200: {"description": "File content"},
            400: {"description": "Missing or malformed signature fields"},
            403: {"description": "Invalid or expired download link"},
            404: {"description": "File not found"},
        },
    )
    def get(self, request: Request, file_id: uuid.UUID):
        """Download a file."""
        return async_to_sync(self._handle_download)(request, file_id)

    async def _handle_download(self, request: Request, file_id: uuid.UUID):
        """Async handler for file download."""
        with tracer.start_as_current_span("download_file") as span:
            span.set_attribute("file.id", str(file_id))

            service = FileDownloadService(_catalog_repo)
            stored, path = await service.open(
                file_id,
                request.query_params.get("exp"),
                request.query_params.get("nonce"),
                request.query_params.get("sig"),
            )

            span.set_status(Status(StatusCode.OK))
            return FileResponse(
                open(path, "rb"),  # pylint: disable=consider-using-with
                as_attachment=True,
                filename=stored.original_name,
                content_type=stored.mime_type or "application/octet-stream",
            )
