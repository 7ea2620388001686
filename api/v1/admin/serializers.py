"""
Serializers for admin API endpoints.
"""

from rest_framework import serializers


class CreateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for create license request."""

    expires_at = serializers.CharField(max_length=40)
    max_devices = serializers.IntegerField(min_value=1, default=1)
    product_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    policy_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    customer_name = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=255
    )
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class UpdateLicenseRequestSerializer(serializers.Serializer):
    """
    Serializer for update license request.

    Used with ``partial=True``: only keys present in the body end up in
    validated_data.
    """

    expires_at = serializers.CharField(max_length=40)
    max_devices = serializers.IntegerField(min_value=1)
    policy_id = serializers.UUIDField(allow_null=True)
    customer_name = serializers.CharField(allow_blank=True, max_length=255)
    customer_email = serializers.EmailField(allow_blank=True)
    notes = serializers.CharField(allow_blank=True)


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    id = serializers.UUIDField()
    license_key = serializers.CharField()
    product_id = serializers.UUIDField(allow_null=True)
    product_name = serializers.CharField()
    policy_id = serializers.UUIDField(allow_null=True)
    customer_name = serializers.CharField()
    customer_email = serializers.CharField()
    max_devices = serializers.IntegerField()
    active_devices = serializers.IntegerField()
    expires_at = serializers.CharField()
    status = serializers.CharField()
    owner_id = serializers.UUIDField(allow_null=True)
    notes = serializers.CharField()
    created_at = serializers.CharField(allow_null=True)
    updated_at = serializers.CharField(allow_null=True)


class DeviceSerializer(serializers.Serializer):
    """Serializer for DeviceDTO."""

    id = serializers.UUIDField()
    license_id = serializers.UUIDField()
    device_fingerprint = serializers.CharField()
    device_name = serializers.CharField()
    device_info = serializers.JSONField()
    status = serializers.CharField()
    activated_at = serializers.CharField(allow_null=True)
    last_validated_at = serializers.CharField(allow_null=True)
    deactivated_at = serializers.CharField(allow_null=True)


class ActivityLogSerializer(serializers.Serializer):
    """Serializer for ActivityLogDTO."""

    id = serializers.UUIDField()
    entity_type = serializers.CharField()
    entity_id = serializers.CharField()
    action = serializers.CharField()
    actor = serializers.CharField()
    details = serializers.JSONField()
    created_at = serializers.CharField(allow_null=True)


class CleanupDevicesRequestSerializer(serializers.Serializer):
    days = serializers.IntegerField(min_value=0, default=90)


class ScopeSerializer(serializers.Serializer):
    """
    One resource scope. The mode is normalized server-side, so any string
    is accepted; unrecognized modes become ``all``.
    """

    mode = serializers.CharField(required=False, allow_blank=True, default="")
    selected_ids = serializers.ListField(
        child=serializers.CharField(allow_blank=True), required=False, default=list
    )


class PermissionsSerializer(serializers.Serializer):
    """Scopes for every resource type."""

    licenses = ScopeSerializer(required=False)
    policies = ScopeSerializer(required=False)
    products = ScopeSerializer(required=False)
