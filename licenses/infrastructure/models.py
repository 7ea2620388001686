"""
License model.
"""
import uuid

from django.core.exceptions import ValidationError
from django.db import models


class License(models.Model):
    """
    A license binding up to ``max_devices`` devices to a product until
    ``expires_at`` (inclusive).
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("revoked", "Revoked"),
        ("expired", "Expired"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_key = models.CharField(max_length=32, unique=True)
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="licenses",
    )
    policy = models.ForeignKey(
        "products.Policy",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="licenses",
    )
    product_name = models.CharField(max_length=255, blank=True, default="")
    customer_name = models.CharField(max_length=255, blank=True, default="")
    customer_email = models.EmailField(blank=True, default="")
    max_devices = models.PositiveIntegerField(default=1)
    expires_at = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    notes = models.TextField(blank=True, default="")
    owner = models.ForeignKey(
        "admins.Admin",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="licenses",
        help_text="Admin who created the license",
    )
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "expires_at"]),
            models.Index(fields=["owner"]),
        ]

    def __str__(self):
        return f"{self.license_key} ({self.status})"

    def clean(self):
        """Validate license fields."""
        if self.max_devices is not None and self.max_devices < 1:
            raise ValidationError("max_devices must be at least 1")
