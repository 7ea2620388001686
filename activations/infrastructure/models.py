"""
Device activation Django ORM model.

This is the infrastructure layer model for device activations.
Domain entities are in activations.domain.activation.
"""
import uuid

from django.core.exceptions import ValidationError
from django.db import models


class DeviceActivation(models.Model):
    """
    A device bound to a license.
    An active row occupies one of the license's device slots.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("deactivated", "Deactivated"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.CASCADE,
        related_name="device_activations",
    )
    device_fingerprint = models.CharField(max_length=64)
    device_info = models.JSONField(default=dict, blank=True)
    device_name = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    activated_at = models.DateTimeField()
    last_validated_at = models.DateTimeField(null=True, blank=True)
    deactivated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "device_activations"
        ordering = ["-activated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["license", "device_fingerprint"],
                name="uniq_device_per_license",
            ),
        ]
        indexes = [
            models.Index(fields=["license", "status"]),
            models.Index(fields=["status", "deactivated_at"]),
        ]

    def clean(self):
        """Validate activation fields."""
        if not self.device_fingerprint or not self.device_fingerprint.strip():
            raise ValidationError("Device fingerprint cannot be empty")

    def __str__(self):
        return f"{self.device_name or self.device_fingerprint[:12]} ({self.status})"
