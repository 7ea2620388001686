"""
License activation service.

Answers the two client requests: "activate this device" and "is this
device still licensed". Both resolve the license by key, fingerprint the
reported hardware, go through the slot manager, and deliver the license's
policy and product files.
"""
import logging
from typing import List, Optional, Tuple

from activations.application.commands.activate_license import (
    ActivateDeviceCommand,
    ValidateDeviceCommand,
)
from activations.application.dto.activation_dto import (
    ActivationResultDTO,
    PolicyDTO,
    ProductFileDTO,
    ValidationResultDTO,
)
from activations.domain.events import DeviceActivated
from activations.domain.fingerprint import generate_device_fingerprint
from activations.domain.services import DeviceSlotManager
from activations.ports.activation_repository import ActivationRepository
from core.domain.events import EventBus
from core.domain.exceptions import DomainException, LicenseNotFoundError
from core.infrastructure.clock import Clock, system_clock
from core.infrastructure.events import event_bus
from core.metrics import device_activations_total, device_validations_total
from licenses.domain.license import License
from licenses.domain.license_key import normalize_license_key
from licenses.ports.license_repository import LicenseRepository
from products.application.services.file_download_service import (
    get_download_signer,
    signed_download_path,
)
from products.domain.download_tokens import DownloadTokenSigner
from products.ports.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


class LicenseActivationService:
    """Client-facing activate/validate operations."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        catalog_repository: CatalogRepository,
        signer: Optional[DownloadTokenSigner] = None,
        clock: Optional[Clock] = None,
        bus: Optional[EventBus] = None,
    ):
        """Initialize service with repositories."""
        self.license_repository = license_repository
        self.catalog_repository = catalog_repository
        self.clock = clock or system_clock
        self.signer = signer or get_download_signer()
        self.event_bus = bus or event_bus
        self.slot_manager = DeviceSlotManager(activation_repository, self.clock)

    async def _load_license(self, license_key: str) -> License:
        license = await self.license_repository.find_by_key(normalize_license_key(license_key))
        if license is None:
            raise LicenseNotFoundError()
        return license

    async def _deliverables(self, license: License) -> Tuple[List[PolicyDTO], List[ProductFileDTO]]:
        policies = []
        if license.policy_id:
            policy = await self.catalog_repository.find_policy(license.policy_id)
            if policy is not None:
                policies.append(
                    PolicyDTO(
                        id=policy.id,
                        policy_name=policy.policy_name,
                        policy_data=policy.policy_data,
                    )
                )

        files = []
        if license.product_id:
            for item in await self.catalog_repository.list_active_product_files(license.product_id):
                files.append(
                    ProductFileDTO(
                        id=item.id,
                        file_id=item.file_id,
                        label=item.label,
                        description=item.description,
                        file_name=item.file_name,
                        file_size=item.file_size,
                        mime_type=item.mime_type,
                        checksum=item.checksum,
                        sort_order=item.sort_order,
                        download_url=item.delivery_url
                        or signed_download_path(self.signer, item.file_id),
                    )
                )
        return policies, files

    async def activate(self, command: ActivateDeviceCommand) -> ActivationResultDTO:
        """
        Activate a device.

        Args:
            command: ActivateDeviceCommand

        Returns:
            ActivationResultDTO; ``created`` is False when the device was
            already active

        Raises:
            LicenseNotFoundError: If no license has this key
            LicenseInactiveError: If the license is revoked
            LicenseExpiredError: If the license is expired
            DeviceLimitReachedError: If every slot is taken
        """
        try:
            license = await self._load_license(command.license_key)
            fingerprint = generate_device_fingerprint(command.device_info)
            activation, changed = await self.slot_manager.activate(
                license, fingerprint, command.device_info
            )
        except DomainException as e:
            device_activations_total.labels(result=e.code.lower()).inc()
            raise

        device_activations_total.labels(result="activated" if changed else "already_active").inc()
        if changed:
            await self.event_bus.publish(
                DeviceActivated(
                    activation_id=activation.id,
                    license_id=license.id,
                    device_name=activation.device_name,
                )
            )

        policies, files = await self._deliverables(license)
        return ActivationResultDTO(
            license_key=license.license_key,
            device_id=activation.id,
            product_id=license.product_id,
            product_name=license.product_name,
            expires_at=self.clock.format_date(license.expires_at),
            created=changed,
            policies=policies,
            product_files=files,
        )

    async def validate(self, command: ValidateDeviceCommand) -> ValidationResultDTO:
        """
        Validate a device.

        Args:
            command: ValidateDeviceCommand

        Returns:
            ValidationResultDTO

        Raises:
            LicenseNotFoundError: If no license has this key
            LicenseInactiveError: If the license is revoked
            LicenseExpiredError: If the license is expired
            DeviceNotActivatedError: If the device holds no active slot
        """
        try:
            license = await self._load_license(command.license_key)
            fingerprint = generate_device_fingerprint(command.device_info)
            activation = await self.slot_manager.validate(license, fingerprint)
        except DomainException as e:
            device_validations_total.labels(result=e.code.lower()).inc()
            raise

        device_validations_total.labels(result="valid").inc()
        policies, files = await self._deliverables(license)
        return ValidationResultDTO(
            license_key=license.license_key,
            valid=True,
            device_id=activation.id,
            expires_at=self.clock.format_date(license.expires_at),
            policies=policies,
            product_files=files,
        )
