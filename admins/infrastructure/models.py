"""
Admin, AdminApiToken and AdminResourceScope models.
"""
import hashlib
import secrets
import uuid
from datetime import timedelta

from django.contrib.auth.hashers import check_password, make_password
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Admin(models.Model):
    """
    An administrator account. Not a Django auth user.
    """

    ROLE_CHOICES = [
        ("admin", "Admin"),
        ("super_admin", "Super Admin"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(blank=True, default="")
    password = models.CharField(max_length=128)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="admin")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "admins"
        ordering = ["username"]
        indexes = [
            models.Index(fields=["role"]),
        ]

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def is_super_admin(self) -> bool:
        return self.role == "super_admin"

    def set_password(self, raw_password: str) -> None:
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password)


class AdminApiToken(models.Model):
    """
    Bearer tokens for the admin API. Only the SHA-256 hash is stored.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    admin = models.ForeignKey(Admin, on_delete=models.CASCADE, related_name="api_tokens")
    key_prefix = models.CharField(max_length=8, editable=False)
    key_hash = models.CharField(max_length=64, editable=False, unique=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_used_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "admin_api_tokens"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.admin.username} - {self.key_prefix}..."

    @staticmethod
    def hash_key(raw_key: str) -> str:
        return hashlib.sha256(raw_key.encode()).hexdigest()

    @classmethod
    def issue(cls, admin: Admin, ttl_days: int = None) -> "AdminApiToken":
        """
        Create a token for ``admin``. The raw key is available as ``raw_key``
        on the returned instance only.
        """
        raw_key = secrets.token_urlsafe(32)
        token = cls(
            admin=admin,
            key_prefix=raw_key[:8],
            key_hash=cls.hash_key(raw_key),
            expires_at=timezone.now() + timedelta(days=ttl_days) if ttl_days else None,
        )
        token.save()
        token.raw_key = raw_key
        return token

    def is_valid(self) -> bool:
        return self.expires_at is None or self.expires_at > timezone.now()

    def mark_used(self) -> None:
        self.last_used_at = timezone.now()
        self.save(update_fields=["last_used_at"])


class AdminResourceScope(models.Model):
    """
    Visibility mode of one admin over one resource type.

    The custom ID set is stored on the same row so that replacing a scope
    is a single-row write and a reader never observes a half-written set.
    """

    RESOURCE_CHOICES = [
        ("licenses", "Licenses"),
        ("policies", "Policies"),
        ("products", "Products"),
    ]
    MODE_CHOICES = [
        ("all", "All"),
        ("none", "None"),
        ("own", "Own"),
        ("custom", "Custom"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    admin = models.ForeignKey(Admin, on_delete=models.CASCADE, related_name="resource_scopes")
    resource_type = models.CharField(max_length=20, choices=RESOURCE_CHOICES)
    mode = models.CharField(max_length=10, choices=MODE_CHOICES, default="all")
    selected_ids = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "admin_resource_scopes"
        constraints = [
            models.UniqueConstraint(
                fields=["admin", "resource_type"], name="uniq_admin_resource_scope"
            ),
        ]

    def __str__(self):
        return f"{self.admin_id} {self.resource_type}={self.mode}"

    def clean(self):
        """Validate scope fields."""
        if self.mode != "custom" and self.selected_ids:
            raise ValidationError("selected_ids are only allowed for custom mode")

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
