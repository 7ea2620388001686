"""
Admin API views.

These endpoints are used by administrators to:
- Create, edit, revoke and list licenses within their scope
- Manage the devices bound to those licenses
- Read the recorded history of a license or device
- Configure other admins' resource scopes (super admins)

Requests are authenticated by AdminTokenAuthenticationMiddleware, which
attaches the acting admin as ``request.admin``.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.manage_device import (
    CleanupDevicesCommand,
    DeactivateDeviceCommand,
    DeleteDeviceCommand,
    ReactivateDeviceCommand,
)
from activations.application.dto.activation_dto import DeviceDTO
from activations.application.handlers.device_admin_handlers import (
    CleanupDevicesHandler,
    DeactivateDeviceHandler,
    DeleteDeviceHandler,
    GetDeviceLogsHandler,
    ReactivateDeviceHandler,
)
from activations.application.queries.get_device_logs import GetDeviceLogsQuery
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from admins.application.commands.set_admin_permissions import (
    SetAdminPermissionsCommand,
    SetAdminScopeCommand,
)
from admins.application.handlers.get_admin_permissions_handler import GetAdminPermissionsHandler
from admins.application.handlers.set_admin_permissions_handler import (
    SetAdminPermissionsHandler,
    SetAdminScopeHandler,
)
from admins.application.queries.get_admin_permissions import GetAdminPermissionsQuery
from admins.domain.admin import AdminAccount
from admins.infrastructure.repositories.django_admin_permission_repository import (
    DjangoAdminPermissionRepository,
)
from admins.infrastructure.repositories.django_admin_repository import DjangoAdminRepository
from api.v1.admin.serializers import (
    ActivityLogSerializer,
    CleanupDevicesRequestSerializer,
    CreateLicenseRequestSerializer,
    DeviceSerializer,
    LicenseSerializer,
    PermissionsSerializer,
    ScopeSerializer,
    UpdateLicenseRequestSerializer,
)
from core.infrastructure.audit_log_repository import DjangoAuditLogRepository
from core.infrastructure.clock import system_clock
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.application.handlers.create_license_handler import CreateLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    RevokeLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.handlers.license_query_handlers import (
    GetLicenseHandler,
    GetLicenseLogsHandler,
    ListLicenseDevicesHandler,
    ListLicensesHandler,
)
from licenses.application.queries.get_license import (
    GetLicenseLogsQuery,
    GetLicenseQuery,
    ListLicenseDevicesQuery,
)
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from products.infrastructure.repositories.django_catalog_repository import (
    DjangoCatalogRepository,
)

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()
_catalog_repo = DjangoCatalogRepository()
_admin_repo = DjangoAdminRepository()
_permission_repo = DjangoAdminPermissionRepository()
_audit_repo = DjangoAuditLogRepository()

tracer = get_tracer(__name__)

ERROR_RESPONSES = {
    400: {"description": "Bad Request"},
    401: {"description": "Missing or invalid admin token"},
    403: {"description": "Outside the admin's scope or role"},
    404: {"description": "Not found"},
}


def _actor(request: Request) -> AdminAccount:
    admin = getattr(request, "admin", None)
    if admin is None:
        raise NotAuthenticated("Admin token required")
    return admin


async def _license_dto(license) -> LicenseDTO:
    active = await _activation_repo.count_active(license.id)
    return LicenseDTO.from_entity(license, active, system_clock)


class LicenseListView(APIView):
    """View for listing and creating licenses."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description="List licenses visible under the admin's license scope.",
        tags=["Admin API"],
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY),
            OpenApiParameter(name="search", type=str, location=OpenApiParameter.QUERY),
        ],
        responses={200: LicenseSerializer(many=True), **ERROR_RESPONSES},
    )
    def get(self, request: Request) -> Response:
        """List licenses."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_licenses") as span:
            actor = _actor(request)
            handler = ListLicensesHandler(_license_repo, _activation_repo)
            result = await handler.handle(
                ListLicensesQuery(
                    actor=actor,
                    status=request.query_params.get("status"),
                    search=request.query_params.get("search"),
                )
            )
            span.set_attribute("result.count", len(result))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(result, many=True).data)

    @extend_schema(
        operation_id="create_license",
        summary="Create License",
        description="Issue a new license with a generated key.",
        tags=["Admin API"],
        request=CreateLicenseRequestSerializer,
        responses={201: LicenseSerializer, **ERROR_RESPONSES},
    )
    def post(self, request: Request) -> Response:
        """Create a license."""
        return async_to_sync(self._handle_create)(request)

    async def _handle_create(self, request: Request) -> Response:
        with tracer.start_as_current_span("create_license") as span:
            actor = _actor(request)
            serializer = CreateLicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = CreateLicenseHandler(_license_repo, _catalog_repo)
            license = await handler.handle(
                CreateLicenseCommand(actor=actor, **serializer.validated_data)
            )

            span.set_attribute("license.id", str(license.id))
            span.set_status(Status(StatusCode.OK))
            return Response(
                LicenseSerializer(await _license_dto(license)).data,
                status=status.HTTP_201_CREATED,
            )


class LicenseDetailView(APIView):
    """View for reading and editing one license."""

    @extend_schema(
        operation_id="get_license",
        summary="Get License",
        tags=["Admin API"],
        responses={200: LicenseSerializer, **ERROR_RESPONSES},
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        """Get a license."""
        return async_to_sync(self._handle_get)(request, license_id)

    async def _handle_get(self, request: Request, license_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("get_license") as span:
            span.set_attribute("license.id", str(license_id))
            handler = GetLicenseHandler(_license_repo, _activation_repo)
            result = await handler.handle(GetLicenseQuery(actor=_actor(request), license_id=license_id))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(result).data)

    @extend_schema(
        operation_id="update_license",
        summary="Update License",
        description=(
            "Change only the provided fields. Moving the expiry date of an expired "
            "license to today or later reactivates it; moving an active license's "
            "expiry into the past expires it."
        ),
        tags=["Admin API"],
        request=UpdateLicenseRequestSerializer,
        responses={200: LicenseSerializer, 409: {"description": "max_devices below active devices"}, **ERROR_RESPONSES},
    )
    def patch(self, request: Request, license_id: uuid.UUID) -> Response:
        """Update a license."""
        return async_to_sync(self._handle_update)(request, license_id)

    async def _handle_update(self, request: Request, license_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("update_license") as span:
            span.set_attribute("license.id", str(license_id))
            serializer = UpdateLicenseRequestSerializer(data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)

            handler = UpdateLicenseHandler(_license_repo, _catalog_repo)
            license = await handler.handle(
                UpdateLicenseCommand(
                    actor=_actor(request), license_id=license_id, **serializer.validated_data
                )
            )
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(await _license_dto(license)).data)


class RevokeLicenseView(APIView):
    """View for revoking a license."""

    @extend_schema(
        operation_id="revoke_license",
        summary="Revoke License",
        description="Revoke a license. Revocation is permanent.",
        tags=["Admin API"],
        request=None,
        responses={200: LicenseSerializer, **ERROR_RESPONSES},
    )
    def post(self, request: Request, license_id: uuid.UUID) -> Response:
        """Revoke a license."""
        return async_to_sync(self._handle_revoke)(request, license_id)

    async def _handle_revoke(self, request: Request, license_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("revoke_license") as span:
            span.set_attribute("license.id", str(license_id))
            handler = RevokeLicenseHandler(_license_repo)
            license = await handler.handle(
                RevokeLicenseCommand(actor=_actor(request), license_id=license_id)
            )
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(await _license_dto(license)).data)


class LicenseDevicesView(APIView):
    """View for listing the devices of a license."""

    @extend_schema(
        operation_id="list_license_devices",
        summary="List License Devices",
        tags=["Admin API"],
        responses={200: DeviceSerializer(many=True), **ERROR_RESPONSES},
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        """List devices of a license."""
        return async_to_sync(self._handle_list)(request, license_id)

    async def _handle_list(self, request: Request, license_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("list_license_devices") as span:
            span.set_attribute("license.id", str(license_id))
            handler = ListLicenseDevicesHandler(_license_repo, _activation_repo)
            result = await handler.handle(
                ListLicenseDevicesQuery(actor=_actor(request), license_id=license_id)
            )
            span.set_status(Status(StatusCode.OK))
            return Response(DeviceSerializer(result, many=True).data)


class LicenseLogsView(APIView):
    """View for the audit history of a license."""

    @extend_schema(
        operation_id="list_license_logs",
        summary="List License Logs",
        description="The 50 most recent recorded changes of a license, newest first.",
        tags=["Admin API"],
        responses={200: ActivityLogSerializer(many=True), **ERROR_RESPONSES},
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        """List audit entries of a license."""
        return async_to_sync(self._handle_logs)(request, license_id)

    async def _handle_logs(self, request: Request, license_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("list_license_logs") as span:
            span.set_attribute("license.id", str(license_id))
            handler = GetLicenseLogsHandler(_license_repo, _audit_repo)
            result = await handler.handle(
                GetLicenseLogsQuery(actor=_actor(request), license_id=license_id)
            )
            span.set_status(Status(StatusCode.OK))
            return Response(ActivityLogSerializer(result, many=True).data)


class DeactivateDeviceView(APIView):
    """View for deactivating a device."""

    @extend_schema(
        operation_id="deactivate_device",
        summary="Deactivate Device",
        tags=["Admin API"],
        request=None,
        responses={200: DeviceSerializer, **ERROR_RESPONSES},
    )
    def post(self, request: Request, device_id: uuid.UUID) -> Response:
        """Deactivate a device."""
        return async_to_sync(self._handle_deactivate)(request, device_id)

    async def _handle_deactivate(self, request: Request, device_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("deactivate_device") as span:
            span.set_attribute("device.id", str(device_id))
            handler = DeactivateDeviceHandler(_activation_repo, _license_repo)
            activation = await handler.handle(
                DeactivateDeviceCommand(actor=_actor(request), activation_id=device_id)
            )
            span.set_status(Status(StatusCode.OK))
            return Response(DeviceSerializer(DeviceDTO.from_entity(activation, system_clock)).data)


class ReactivateDeviceView(APIView):
    """View for reactivating a device."""

    @extend_schema(
        operation_id="reactivate_device",
        summary="Reactivate Device",
        tags=["Admin API"],
        request=None,
        responses={
            200: DeviceSerializer,
            409: {"description": "Device already active or no free slot"},
            **ERROR_RESPONSES,
        },
    )
    def post(self, request: Request, device_id: uuid.UUID) -> Response:
        """Reactivate a device."""
        return async_to_sync(self._handle_reactivate)(request, device_id)

    async def _handle_reactivate(self, request: Request, device_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("reactivate_device") as span:
            span.set_attribute("device.id", str(device_id))
            handler = ReactivateDeviceHandler(_activation_repo, _license_repo)
            activation = await handler.handle(
                ReactivateDeviceCommand(actor=_actor(request), activation_id=device_id)
            )
            span.set_status(Status(StatusCode.OK))
            return Response(DeviceSerializer(DeviceDTO.from_entity(activation, system_clock)).data)


class DeviceLogsView(APIView):
    """View for the activity history of a device."""

    @extend_schema(
        operation_id="list_device_logs",
        summary="List Device Logs",
        description=(
            "The 50 most recent recorded events of a device, newest first. "
            "Covers client activation and every admin change."
        ),
        tags=["Admin API"],
        responses={200: ActivityLogSerializer(many=True), **ERROR_RESPONSES},
    )
    def get(self, request: Request, device_id: uuid.UUID) -> Response:
        """List activity of a device."""
        return async_to_sync(self._handle_logs)(request, device_id)

    async def _handle_logs(self, request: Request, device_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("list_device_logs") as span:
            span.set_attribute("device.id", str(device_id))
            handler = GetDeviceLogsHandler(_activation_repo, _license_repo, _audit_repo)
            result = await handler.handle(
                GetDeviceLogsQuery(actor=_actor(request), activation_id=device_id)
            )
            span.set_status(Status(StatusCode.OK))
            return Response(ActivityLogSerializer(result, many=True).data)


class DeviceDetailView(APIView):
    """View for deleting a device."""

    @extend_schema(
        operation_id="delete_device",
        summary="Delete Device",
        description="Permanently delete a device activation.",
        tags=["Admin API"],
        responses={204: None, **ERROR_RESPONSES},
    )
    def delete(self, request: Request, device_id: uuid.UUID) -> Response:
        """Delete a device."""
        return async_to_sync(self._handle_delete)(request, device_id)

    async def _handle_delete(self, request: Request, device_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("delete_device") as span:
            span.set_attribute("device.id", str(device_id))
            handler = DeleteDeviceHandler(_activation_repo, _license_repo)
            await handler.handle(DeleteDeviceCommand(actor=_actor(request), activation_id=device_id))
            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)


class CleanupDevicesView(APIView):
    """View for purging long-deactivated devices."""

    @extend_schema(
        operation_id="cleanup_devices",
        summary="Clean Up Devices",
        description="Delete devices deactivated at least `days` days ago. Super admins only.",
        tags=["Admin API"],
        request=CleanupDevicesRequestSerializer,
        responses={200: {"description": "Number of deleted devices"}, **ERROR_RESPONSES},
    )
    def post(self, request: Request) -> Response:
        """Clean up devices."""
        return async_to_sync(self._handle_cleanup)(request)

    async def _handle_cleanup(self, request: Request) -> Response:
        with tracer.start_as_current_span("cleanup_devices") as span:
            serializer = CleanupDevicesRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            days = serializer.validated_data["days"]

            handler = CleanupDevicesHandler(_activation_repo, _license_repo)
            removed = await handler.handle(CleanupDevicesCommand(actor=_actor(request), days=days))
            span.set_attribute("devices.removed", removed)
            span.set_status(Status(StatusCode.OK))
            return Response({"deleted": removed, "days": days})


class AdminPermissionsView(APIView):
    """View for reading and replacing an admin's scopes."""

    @extend_schema(
        operation_id="get_admin_permissions",
        summary="Get Admin Permissions",
        tags=["Admin API"],
        responses={200: PermissionsSerializer, **ERROR_RESPONSES},
    )
    def get(self, request: Request, admin_id: uuid.UUID) -> Response:
        """Get an admin's scopes."""
        return async_to_sync(self._handle_get)(request, admin_id)

    async def _handle_get(self, request: Request, admin_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("get_admin_permissions") as span:
            span.set_attribute("admin.id", str(admin_id))
            handler = GetAdminPermissionsHandler(_admin_repo, _permission_repo)
            permissions = await handler.handle(
                GetAdminPermissionsQuery(actor=_actor(request), target_admin_id=admin_id)
            )
            span.set_status(Status(StatusCode.OK))
            return Response(permissions.to_dict())

    @extend_schema(
        operation_id="set_admin_permissions",
        summary="Set Admin Permissions",
        description=(
            "Replace every scope of a non-super admin in one transaction. "
            "Missing resource types default to `all`. Super admins only."
        ),
        tags=["Admin API"],
        request=PermissionsSerializer,
        responses={200: PermissionsSerializer, **ERROR_RESPONSES},
    )
    def put(self, request: Request, admin_id: uuid.UUID) -> Response:
        """Replace an admin's scopes."""
        return async_to_sync(self._handle_put)(request, admin_id)

    async def _handle_put(self, request: Request, admin_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("set_admin_permissions") as span:
            span.set_attribute("admin.id", str(admin_id))
            serializer = PermissionsSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = SetAdminPermissionsHandler(_admin_repo, _permission_repo)
            permissions = await handler.handle(
                SetAdminPermissionsCommand(
                    actor=_actor(request),
                    target_admin_id=admin_id,
                    permissions=serializer.validated_data,
                )
            )
            span.set_status(Status(StatusCode.OK))
            return Response(permissions.to_dict())


class AdminScopeView(APIView):
    """View for replacing one of an admin's scopes."""

    @extend_schema(
        operation_id="set_admin_scope",
        summary="Set Admin Scope",
        description="Replace the scope of one resource type. Super admins only.",
        tags=["Admin API"],
        request=ScopeSerializer,
        responses={200: ScopeSerializer, **ERROR_RESPONSES},
    )
    def put(self, request: Request, admin_id: uuid.UUID, resource_type: str) -> Response:
        """Replace one scope."""
        return async_to_sync(self._handle_put)(request, admin_id, resource_type)

    async def _handle_put(
        self, request: Request, admin_id: uuid.UUID, resource_type: str
    ) -> Response:
        with tracer.start_as_current_span("set_admin_scope") as span:
            span.set_attribute("admin.id", str(admin_id))
            span.set_attribute("resource_type", resource_type)
            serializer = ScopeSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = SetAdminScopeHandler(_admin_repo, _permission_repo)
            scope = await handler.handle(
                SetAdminScopeCommand(
                    actor=_actor(request),
                    target_admin_id=admin_id,
                    resource_type=resource_type,
                    mode=serializer.validated_data["mode"],
                    selected_ids=serializer.validated_data["selected_ids"],
                )
            )
            span.set_status(Status(StatusCode.OK))
            return Response(scope.to_dict())
