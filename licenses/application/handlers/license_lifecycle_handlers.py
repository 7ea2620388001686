"""
License lifecycle handlers.

Handlers for update and revoke license commands.
"""
import logging
from typing import Any, Dict

from core.domain.events import EventBus
from core.domain.exceptions import InvalidInputError, PolicyNotFoundError
from core.infrastructure.clock import Clock, system_clock
from core.infrastructure.events import event_bus
from core.metrics import licenses_revoked_total
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.services.license_access import LicenseAccessGuard
from licenses.domain.events import LicenseRevoked, LicenseStatusChanged, LicenseUpdated
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository
from products.ports.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


class UpdateLicenseHandler:
    """Handler for UpdateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        catalog_repository: CatalogRepository,
        access_guard: LicenseAccessGuard = None,
        clock: Clock = None,
        bus: EventBus = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.catalog_repository = catalog_repository
        self.access_guard = access_guard or LicenseAccessGuard(license_repository)
        self.clock = clock or system_clock
        self.event_bus = bus or event_bus

    async def handle(self, command: UpdateLicenseCommand) -> License:
        """
        Handle update license command.

        Only provided fields change. Moving the expiry date applies the
        automatic active/expired transitions.

        Args:
            command: UpdateLicenseCommand

        Returns:
            Updated License entity

        Raises:
            LicenseNotFoundError: If license not found
            ResourceAccessDeniedError: If outside the actor's scope
            InvalidDateError: If the new expiry date cannot be parsed
            InvalidInputError: If max_devices is below 1
            MaxDevicesBelowActiveCountError: If max_devices is below the
                number of active devices
            PolicyNotFoundError: If the new policy does not exist
        """
        license = await self.access_guard.load(command.actor, command.license_id)
        provided = command.provided()
        now = self.clock.now()
        changes: Dict[str, Any] = {}

        if "max_devices" in provided:
            max_devices = provided.pop("max_devices")
            if max_devices is None or max_devices < 1:
                raise InvalidInputError(
                    "max_devices must be at least 1", code="INVALID_MAX_DEVICES"
                )
            changes["max_devices"] = max_devices

        if "policy_id" in provided:
            policy_id = provided.pop("policy_id")
            if policy_id and await self.catalog_repository.find_policy(policy_id) is None:
                raise PolicyNotFoundError()
            changes["policy_id"] = policy_id or None

        new_expiry = None
        if "expires_at" in provided:
            new_expiry = self.clock.parse_date(provided.pop("expires_at"))

        for name, value in provided.items():
            changes[name] = value if value is not None else ""

        updated = license.update_details(now, **changes)
        if new_expiry is not None:
            updated = updated.change_expiry(new_expiry, self.clock.to_date(now), now)

        if "max_devices" in changes:
            saved = await self.license_repository.save_within_active_count(updated)
        else:
            saved = await self.license_repository.save(updated)
        logger.info(
            "License updated",
            extra={"license_id": str(saved.id), "fields": sorted(command.provided())},
        )

        audit_changes = {
            name: str(value) if value is not None else None for name, value in changes.items()
        }
        if new_expiry is not None:
            audit_changes["expires_at"] = self.clock.format_date(new_expiry)
        await self.event_bus.publish(
            LicenseUpdated(license_id=saved.id, changes=audit_changes, actor_id=command.actor.id)
        )
        if saved.status != license.status:
            await self.event_bus.publish(
                LicenseStatusChanged(
                    license_id=saved.id,
                    old_status=license.status.value,
                    new_status=saved.status.value,
                    actor_id=command.actor.id,
                )
            )
        return saved


class RevokeLicenseHandler:
    """Handler for RevokeLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        access_guard: LicenseAccessGuard = None,
        clock: Clock = None,
        bus: EventBus = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.access_guard = access_guard or LicenseAccessGuard(license_repository)
        self.clock = clock or system_clock
        self.event_bus = bus or event_bus

    async def handle(self, command: RevokeLicenseCommand) -> License:
        """
        Handle revoke license command. Revoking twice is a no-op.

        Args:
            command: RevokeLicenseCommand

        Returns:
            Revoked License entity

        Raises:
            LicenseNotFoundError: If license not found
            ResourceAccessDeniedError: If outside the actor's scope
        """
        license = await self.access_guard.load(command.actor, command.license_id)
        revoked = license.revoke(self.clock.now())
        if revoked is license:
            return license

        saved = await self.license_repository.save(revoked)
        licenses_revoked_total.inc()
        logger.info("License revoked", extra={"license_id": str(saved.id)})
        await self.event_bus.publish(
            LicenseRevoked(license_id=saved.id, actor_id=command.actor.id)
        )
        return saved
