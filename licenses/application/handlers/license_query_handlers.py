"""
License query handlers.

Listing and detail reads, filtered through the admin's license scope.
"""
from typing import List

from activations.application.dto.activation_dto import ActivityLogDTO, DeviceDTO
from activations.ports.activation_repository import ActivationRepository
from core.domain.value_objects import LicenseStatus
from core.infrastructure.clock import Clock, system_clock
from core.ports.audit_log_repository import AuditLogRepository
from licenses.application.dto.license_dto import LicenseDTO
from licenses.application.queries.get_license import (
    GetLicenseLogsQuery,
    GetLicenseQuery,
    ListLicenseDevicesQuery,
)
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.application.services.license_access import LicenseAccessGuard
from licenses.ports.license_repository import LicenseRepository


class _LicenseQueryHandler:
    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        access_guard: LicenseAccessGuard = None,
        clock: Clock = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.access_guard = access_guard or LicenseAccessGuard(license_repository)
        self.clock = clock or system_clock


class ListLicensesHandler(_LicenseQueryHandler):
    """Handler for ListLicensesQuery."""

    async def handle(self, query: ListLicensesQuery) -> List[LicenseDTO]:
        """
        Handle list licenses query.

        Args:
            query: ListLicensesQuery

        Returns:
            List of LicenseDTO visible to the actor; an unknown status
            filter is ignored
        """
        scope_filter = await self.access_guard.listing_filter(query.actor)
        status = None
        if query.status:
            try:
                status = LicenseStatus(query.status.strip().lower())
            except ValueError:
                status = None

        licenses = await self.license_repository.list(
            scope_filter=scope_filter, status=status, search=(query.search or "").strip() or None
        )
        result = []
        for license in licenses:
            active = await self.activation_repository.count_active(license.id)
            result.append(LicenseDTO.from_entity(license, active, self.clock))
        return result


class GetLicenseHandler(_LicenseQueryHandler):
    """Handler for GetLicenseQuery."""

    async def handle(self, query: GetLicenseQuery) -> LicenseDTO:
        """
        Handle get license query.

        Raises:
            LicenseNotFoundError: If license not found
            ResourceAccessDeniedError: If outside the actor's scope
        """
        license = await self.access_guard.load(query.actor, query.license_id)
        active = await self.activation_repository.count_active(license.id)
        return LicenseDTO.from_entity(license, active, self.clock)


class ListLicenseDevicesHandler(_LicenseQueryHandler):
    """Handler for ListLicenseDevicesQuery."""

    async def handle(self, query: ListLicenseDevicesQuery) -> List[DeviceDTO]:
        """
        Handle list license devices query.

        Raises:
            LicenseNotFoundError: If license not found
            ResourceAccessDeniedError: If outside the actor's scope
        """
        license = await self.access_guard.load(query.actor, query.license_id)
        activations = await self.activation_repository.list_by_license(license.id)
        return [DeviceDTO.from_entity(activation, self.clock) for activation in activations]


class GetLicenseLogsHandler:
    """Handler for GetLicenseLogsQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        audit_log_repository: AuditLogRepository,
        access_guard: LicenseAccessGuard = None,
        clock: Clock = None,
    ):
        self.audit_log_repository = audit_log_repository
        self.access_guard = access_guard or LicenseAccessGuard(license_repository)
        self.clock = clock or system_clock

    async def handle(self, query: GetLicenseLogsQuery) -> List[ActivityLogDTO]:
        """
        Handle get license logs query.

        Raises:
            LicenseNotFoundError: If license not found
            ResourceAccessDeniedError: If outside the actor's scope
        """
        license = await self.access_guard.load(query.actor, query.license_id)
        entries = await self.audit_log_repository.list_for_entity(
            "license", str(license.id), query.limit
        )
        return [ActivityLogDTO.from_entry(entry, self.clock) for entry in entries]
