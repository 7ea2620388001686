"""
CreateLicenseHandler.

Handler for issuing a new license.
"""
import logging

from core.domain.events import EventBus
from core.domain.exceptions import (
    DuplicateResourceError,
    InvalidInputError,
    PolicyNotFoundError,
    ProductNotFoundError,
)
from core.infrastructure.clock import Clock, system_clock
from core.infrastructure.events import event_bus
from core.metrics import licenses_created_total
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.domain.events import LicenseCreated
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.ports.license_repository import LicenseRepository
from products.ports.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)

KEY_ATTEMPTS = 3


class CreateLicenseHandler:
    """Handler for CreateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        catalog_repository: CatalogRepository,
        clock: Clock = None,
        bus: EventBus = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.catalog_repository = catalog_repository
        self.clock = clock or system_clock
        self.event_bus = bus or event_bus

    async def handle(self, command: CreateLicenseCommand) -> License:
        """
        Handle create license command.

        Args:
            command: CreateLicenseCommand

        Returns:
            Created License entity

        Raises:
            InvalidDateError: If the expiry date cannot be parsed
            InvalidInputError: If max_devices is below 1
            ProductNotFoundError: If the product does not exist
            PolicyNotFoundError: If the policy does not exist
        """
        expires_at = self.clock.parse_date(command.expires_at)
        if command.max_devices is None or command.max_devices < 1:
            raise InvalidInputError("max_devices must be at least 1", code="INVALID_MAX_DEVICES")

        product_name = ""
        if command.product_id:
            product = await self.catalog_repository.find_product(command.product_id)
            if product is None:
                raise ProductNotFoundError()
            product_name = product.name
        if command.policy_id and await self.catalog_repository.find_policy(command.policy_id) is None:
            raise PolicyNotFoundError()

        now = self.clock.now()
        for attempt in range(1, KEY_ATTEMPTS + 1):
            license = License.create(
                license_key=generate_license_key(),
                expires_at=expires_at,
                now=now,
                max_devices=command.max_devices,
                product_id=command.product_id,
                policy_id=command.policy_id,
                product_name=product_name,
                customer_name=command.customer_name,
                customer_email=command.customer_email,
                owner_id=command.actor.id,
                notes=command.notes,
            )
            try:
                saved = await self.license_repository.save(license)
                break
            except DuplicateResourceError:
                if attempt == KEY_ATTEMPTS:
                    raise
                logger.warning("License key collision, regenerating")

        licenses_created_total.inc()
        logger.info(
            "License created",
            extra={"license_id": str(saved.id), "actor_id": str(command.actor.id)},
        )
        await self.event_bus.publish(
            LicenseCreated(
                license_id=saved.id,
                license_key=saved.license_key,
                max_devices=saved.max_devices,
                expires_at=self.clock.format_date(saved.expires_at),
                actor_id=command.actor.id,
            )
        )
        return saved
