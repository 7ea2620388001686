"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from datetime import date, datetime
from typing import Any, List, Optional

from asgiref.sync import sync_to_async
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q

from core.domain.exceptions import (
    DuplicateResourceError,
    InvalidInputError,
    LicenseNotFoundError,
    MaxDevicesBelowActiveCountError,
)
from core.domain.value_objects import DeviceStatus, LicenseStatus
from core.infrastructure.database import license_slot_locks
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    @staticmethod
    def to_domain(model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            license_key=model.license_key,
            product_id=model.product_id,
            policy_id=model.policy_id,
            product_name=model.product_name,
            customer_name=model.customer_name,
            customer_email=model.customer_email,
            max_devices=model.max_devices,
            expires_at=model.expires_at,
            status=LicenseStatus(model.status),
            owner_id=model.owner_id,
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _apply(model: LicenseModel, license: License) -> LicenseModel:
        model.license_key = license.license_key
        model.product_id = license.product_id
        model.policy_id = license.policy_id
        model.product_name = license.product_name
        model.customer_name = license.customer_name
        model.customer_email = license.customer_email
        model.max_devices = license.max_devices
        model.expires_at = license.expires_at
        model.status = license.status.value
        model.owner_id = license.owner_id
        model.notes = license.notes
        model.created_at = license.created_at
        model.updated_at = license.updated_at
        return model

    def _write(self, model: LicenseModel, license: License) -> License:
        self._apply(model, license)
        try:
            with transaction.atomic():
                model.full_clean(validate_unique=False)
                model.save()
        except ValidationError as e:
            raise InvalidInputError("; ".join(e.messages), code="INVALID_LICENSE") from e
        except IntegrityError as e:
            raise DuplicateResourceError("License key already exists") from e
        return self.to_domain(model)

    @sync_to_async
    def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        model = LicenseModel.objects.filter(id=license.id).first() or LicenseModel(id=license.id)
        return self._write(model, license)

    def _save_within_active_count(self, license: License) -> License:
        with license_slot_locks.hold(license.id), transaction.atomic():
            model = LicenseModel.objects.select_for_update().filter(id=license.id).first()
            if model is None:
                raise LicenseNotFoundError()
            active = model.device_activations.filter(status=DeviceStatus.ACTIVE.value).count()
            if license.max_devices < active:
                raise MaxDevicesBelowActiveCountError(active)
            return self._write(model, license)

    async def save_within_active_count(self, license: License) -> License:
        """
        Save a license whose max_devices changed.

        The active device count is re-read under the same per-license lock
        the slot manager activates under, so no activation can land between
        the check and the write.

        Args:
            license: License entity to save

        Returns:
            Saved license entity

        Raises:
            LicenseNotFoundError: If the license disappeared
            MaxDevicesBelowActiveCountError: If max_devices is below the
                number of active devices
        """
        return await sync_to_async(self._save_within_active_count)(license)

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        try:
            return self.to_domain(LicenseModel.objects.get(id=license_id))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            license_key: Normalized license key

        Returns:
            License entity or None if not found
        """
        model = LicenseModel.objects.filter(license_key=license_key).first()
        return self.to_domain(model) if model else None

    @sync_to_async
    def list(
        self,
        scope_filter: Any = None,
        status: Optional[LicenseStatus] = None,
        search: Optional[str] = None,
    ) -> List[License]:
        """
        List licenses visible under a scope filter.

        Args:
            scope_filter: Q object from build_scope_filter
            status: Optional status filter
            search: Optional case-insensitive match on key, customer or product

        Returns:
            List of License entities, newest first
        """
        queryset = LicenseModel.objects.filter(scope_filter or Q())
        if status is not None:
            queryset = queryset.filter(status=status.value)
        if search:
            queryset = queryset.filter(
                Q(license_key__icontains=search)
                | Q(customer_name__icontains=search)
                | Q(customer_email__icontains=search)
                | Q(product_name__icontains=search)
            )
        return [self.to_domain(model) for model in queryset.order_by("-created_at")]

    @sync_to_async
    def find_overdue(self, today: date) -> List[License]:
        queryset = LicenseModel.objects.filter(
            status=LicenseStatus.ACTIVE.value, expires_at__lt=today
        )
        return [self.to_domain(model) for model in queryset]

    @sync_to_async
    def expire_overdue(self, today: date, now: datetime) -> int:
        """
        Bulk-transition overdue active licenses in a single UPDATE.

        Args:
            today: Current date in the canonical time zone
            now: Timestamp stamped into updated_at

        Returns:
            Number of licenses transitioned
        """
        return LicenseModel.objects.filter(
            status=LicenseStatus.ACTIVE.value, expires_at__lt=today
        ).update(status=LicenseStatus.EXPIRED.value, updated_at=now)
