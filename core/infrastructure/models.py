"""
AuditLog model.
"""
import uuid

from django.db import models


class AuditLog(models.Model):
    """
    Immutable audit trail of license, device and permission changes.
    """

    ENTITY_CHOICES = [
        ("license", "License"),
        ("device", "Device"),
        ("admin", "Admin"),
        ("system", "System"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    entity_type = models.CharField(max_length=50, choices=ENTITY_CHOICES)
    entity_id = models.CharField(max_length=64, blank=True, default="")
    action = models.CharField(max_length=50)
    details = models.JSONField(default=dict, help_text="Details of the change")
    actor = models.CharField(
        max_length=64, default="system", help_text="Admin ID, or 'system' for scheduled jobs"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["created_at"]),
            models.Index(fields=["action"]),
        ]

    def __str__(self):
        return f"{self.action} - {self.entity_type} {self.entity_id}"
