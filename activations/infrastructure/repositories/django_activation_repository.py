"""
Django implementation of ActivationRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from activations.domain.activation import DeviceActivation
from activations.infrastructure.models import DeviceActivation as DeviceActivationModel
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import (
    DeviceAlreadyActiveError,
    DeviceLimitReachedError,
    DeviceNotFoundError,
    LicenseNotFoundError,
)
from core.domain.value_objects import DeviceStatus
from core.infrastructure.database import license_slot_locks
from licenses.infrastructure.models import License as LicenseModel

logger = logging.getLogger(__name__)


class DjangoActivationRepository(ActivationRepository):
    """
    Django ORM implementation of ActivationRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    @staticmethod
    def _to_domain(model: DeviceActivationModel) -> DeviceActivation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django DeviceActivation model

        Returns:
            DeviceActivation domain entity
        """
        return DeviceActivation(
            id=model.id,
            license_id=model.license_id,
            device_fingerprint=model.device_fingerprint,
            status=DeviceStatus(model.status),
            activated_at=model.activated_at,
            last_validated_at=model.last_validated_at,
            deactivated_at=model.deactivated_at,
            device_name=model.device_name,
            device_info=model.device_info or {},
        )

    @staticmethod
    def _apply(model: DeviceActivationModel, activation: DeviceActivation) -> DeviceActivationModel:
        model.license_id = activation.license_id
        model.device_fingerprint = activation.device_fingerprint
        model.device_info = activation.device_info
        model.device_name = activation.device_name
        model.status = activation.status.value
        model.activated_at = activation.activated_at
        model.last_validated_at = activation.last_validated_at
        model.deactivated_at = activation.deactivated_at
        return model

    @staticmethod
    def _lock_license(license_id: uuid.UUID) -> LicenseModel:
        license = LicenseModel.objects.select_for_update().filter(id=license_id).first()
        if license is None:
            raise LicenseNotFoundError()
        return license

    @staticmethod
    def _active_count(license_id: uuid.UUID) -> int:
        return DeviceActivationModel.objects.filter(
            license_id=license_id, status=DeviceStatus.ACTIVE.value
        ).count()

    @sync_to_async
    def save(self, activation: DeviceActivation) -> DeviceActivation:
        """
        Save an activation entity.

        Args:
            activation: DeviceActivation entity to save

        Returns:
            Saved activation entity
        """
        model = DeviceActivationModel.objects.filter(id=activation.id).first()
        if model is None:
            model = DeviceActivationModel(id=activation.id)
        self._apply(model, activation).save()
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, activation_id: uuid.UUID) -> Optional[DeviceActivation]:
        """
        Find an activation by ID.

        Args:
            activation_id: Activation UUID

        Returns:
            DeviceActivation entity or None if not found
        """
        model = DeviceActivationModel.objects.filter(id=activation_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_active(
        self, license_id: uuid.UUID, fingerprint: str
    ) -> Optional[DeviceActivation]:
        model = DeviceActivationModel.objects.filter(
            license_id=license_id,
            device_fingerprint=fingerprint,
            status=DeviceStatus.ACTIVE.value,
        ).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def count_active(self, license_id: uuid.UUID) -> int:
        return self._active_count(license_id)

    @sync_to_async
    def list_by_license(self, license_id: uuid.UUID) -> List[DeviceActivation]:
        queryset = DeviceActivationModel.objects.filter(license_id=license_id).order_by(
            "-activated_at"
        )
        return [self._to_domain(model) for model in queryset]

    @sync_to_async
    def touch_active(
        self, activation_id: uuid.UUID, now: datetime
    ) -> Optional[DeviceActivation]:
        """
        Stamp last_validated_at on an activation that is still active.

        Only the timestamp column is written, and only while the row is
        active, so a concurrent deactivation is never undone.

        Args:
            activation_id: Activation UUID
            now: Validation timestamp

        Returns:
            Updated activation, or None if it is no longer active
        """
        updated = DeviceActivationModel.objects.filter(
            id=activation_id, status=DeviceStatus.ACTIVE.value
        ).update(last_validated_at=now)
        if not updated:
            return None
        model = DeviceActivationModel.objects.filter(id=activation_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def mark_deactivated(self, activation_id: uuid.UUID, now: datetime) -> DeviceActivation:
        """
        Release the slot held by an activation in a single UPDATE.

        Only status and deactivated_at are written; an already deactivated
        device gets a fresh deactivated_at.

        Args:
            activation_id: Activation UUID
            now: Deactivation timestamp

        Returns:
            Activation as stored

        Raises:
            DeviceNotFoundError: If the activation does not exist
        """
        updated = DeviceActivationModel.objects.filter(id=activation_id).update(
            status=DeviceStatus.DEACTIVATED.value, deactivated_at=now
        )
        model = DeviceActivationModel.objects.filter(id=activation_id).first() if updated else None
        if model is None:
            raise DeviceNotFoundError()
        return self._to_domain(model)

    def _activate_within_limit(
        self, candidate: DeviceActivation, now: datetime
    ) -> Tuple[DeviceActivation, bool]:
        with license_slot_locks.hold(candidate.license_id), transaction.atomic():
            license = self._lock_license(candidate.license_id)

            existing = DeviceActivationModel.objects.filter(
                license_id=candidate.license_id,
                device_fingerprint=candidate.device_fingerprint,
            ).first()
            if existing is not None and existing.status == DeviceStatus.ACTIVE.value:
                return self._to_domain(existing), False

            if self._active_count(candidate.license_id) >= license.max_devices:
                raise DeviceLimitReachedError()

            if existing is not None:
                activation = self._to_domain(existing).reuse(
                    now, candidate.device_name, candidate.device_info
                )
                self._apply(existing, activation).save()
                return self._to_domain(existing), True

            model = self._apply(DeviceActivationModel(id=candidate.id), candidate)
            try:
                with transaction.atomic():
                    model.save(force_insert=True)
            except IntegrityError:
                # Another process inserted the same fingerprint first
                existing = DeviceActivationModel.objects.get(
                    license_id=candidate.license_id,
                    device_fingerprint=candidate.device_fingerprint,
                )
                logger.info(
                    "Concurrent activation of the same device",
                    extra={"license_id": str(candidate.license_id)},
                )
                return self._to_domain(existing), False
            return self._to_domain(model), True

    async def activate_within_limit(
        self, candidate: DeviceActivation, now: datetime
    ) -> Tuple[DeviceActivation, bool]:
        """
        Occupy a slot for ``candidate`` unless the license is full.

        Args:
            candidate: Freshly created activation for the device
            now: Activation timestamp

        Returns:
            Tuple of (activation, changed)

        Raises:
            LicenseNotFoundError: If the license disappeared
            DeviceLimitReachedError: If every slot is taken
        """
        return await sync_to_async(self._activate_within_limit)(candidate, now)

    def _reactivate_within_limit(self, activation_id: uuid.UUID, now: datetime) -> DeviceActivation:
        model = DeviceActivationModel.objects.filter(id=activation_id).first()
        if model is None:
            raise DeviceNotFoundError()

        with license_slot_locks.hold(model.license_id), transaction.atomic():
            license = self._lock_license(model.license_id)
            model.refresh_from_db()
            if model.status == DeviceStatus.ACTIVE.value:
                raise DeviceAlreadyActiveError()
            if self._active_count(model.license_id) >= license.max_devices:
                raise DeviceLimitReachedError()

            activation = self._to_domain(model).reactivate(now)
            self._apply(model, activation).save()
            return self._to_domain(model)

    async def reactivate_within_limit(
        self, activation_id: uuid.UUID, now: datetime
    ) -> DeviceActivation:
        """
        Bring a deactivated device back unless the license is full.

        Raises:
            DeviceNotFoundError: If the activation does not exist
            DeviceAlreadyActiveError: If it is already active
            DeviceLimitReachedError: If every slot is taken
        """
        return await sync_to_async(self._reactivate_within_limit)(activation_id, now)

    @sync_to_async
    def delete(self, activation_id: uuid.UUID) -> bool:
        deleted, _ = DeviceActivationModel.objects.filter(id=activation_id).delete()
        return deleted > 0

    @sync_to_async
    def delete_deactivated_before(self, threshold: datetime) -> int:
        """
        Hard-delete deactivated activations with deactivated_at <= threshold.

        Args:
            threshold: Cutoff timestamp

        Returns:
            Number of rows deleted
        """
        deleted, _ = DeviceActivationModel.objects.filter(
            status=DeviceStatus.DEACTIVATED.value,
            deactivated_at__isnull=False,
            deactivated_at__lte=threshold,
        ).delete()
        return deleted
