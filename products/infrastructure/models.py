"""
Product, Policy, FileAsset and ProductFile models.
"""
import uuid

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a product that can be licensed.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("inactive", "Inactive"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True, help_text="Product display name")
    description = models.TextField(blank=True, default="")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    owner = models.ForeignKey(
        "admins.Admin",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]

    def clean(self):
        """Validate product fields."""
        if not self.name:
            raise ValidationError("Name is required")

    def save(self, *args, **kwargs):
        """Save product with validation."""
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name


class Policy(models.Model):
    """
    A named bundle of client-side settings delivered on activation.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    policy_name = models.CharField(max_length=255, unique=True)
    policy_data = models.JSONField(default=dict, blank=True)
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="policies",
    )
    owner = models.ForeignKey(
        "admins.Admin",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="policies",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "policies"
        ordering = ["policy_name"]
        verbose_name_plural = "policies"

    def __str__(self):
        return self.policy_name


class FileAsset(models.Model):
    """
    An uploaded file stored under settings.FILE_STORAGE_ROOT.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    original_name = models.CharField(max_length=255)
    storage_path = models.CharField(
        max_length=500, help_text="Path relative to FILE_STORAGE_ROOT"
    )
    mime_type = models.CharField(max_length=100, default="application/octet-stream")
    file_size = models.BigIntegerField(default=0)
    checksum = models.CharField(max_length=64, blank=True, default="", help_text="SHA-256 hex")
    uploaded_by = models.ForeignKey(
        "admins.Admin",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="uploaded_files",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "file_assets"
        ordering = ["-created_at"]

    def __str__(self):
        return self.original_name


class ProductFile(models.Model):
    """
    Attaches a file to a product for delivery to activated clients.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="files")
    file = models.ForeignKey(FileAsset, on_delete=models.CASCADE, related_name="product_links")
    label = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    delivery_url = models.URLField(
        blank=True, default="", help_text="External URL served instead of a signed link"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "product_files"
        ordering = ["sort_order", "created_at"]
        indexes = [
            models.Index(fields=["product", "is_active"]),
        ]

    def __str__(self):
        return f"{self.product.name} - {self.label or self.file.original_name}"
