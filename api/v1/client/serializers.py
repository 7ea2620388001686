"""
Serializers for client API endpoints.
"""

from rest_framework import serializers

from activations.domain.fingerprint import FINGERPRINT_FIELDS
from core.domain.value_objects import DeviceInfo


class DeviceInfoSerializer(serializers.Serializer):
    """Hardware identifiers plus display labels reported by a client."""

    client_id = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    cpu_id = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    motherboard_sn = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=255
    )
    mac_address = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    disk_serial = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    machine_id = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    hostname = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    os = serializers.CharField(required=False, allow_blank=True, default="", max_length=100)
    os_version = serializers.CharField(required=False, allow_blank=True, default="", max_length=100)

    def validate(self, attrs):
        if not any(attrs.get(name, "").strip() for name in FINGERPRINT_FIELDS):
            raise serializers.ValidationError("At least one hardware identifier is required")
        return attrs


class LicenseRequestSerializer(serializers.Serializer):
    """Serializer for activate and validate requests."""

    license_key = serializers.CharField(max_length=64)
    device_info = DeviceInfoSerializer()

    def to_device_info(self) -> DeviceInfo:
        return DeviceInfo(**self.validated_data["device_info"])


class PolicySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    policy_name = serializers.CharField()
    policy_data = serializers.JSONField()


class ProductFileSerializer(serializers.Serializer):
    """Product file with an absolute download link."""

    id = serializers.UUIDField()
    file_id = serializers.UUIDField()
    label = serializers.CharField()
    description = serializers.CharField()
    file_name = serializers.CharField()
    file_size = serializers.IntegerField()
    mime_type = serializers.CharField()
    checksum = serializers.CharField()
    sort_order = serializers.IntegerField()
    download_url = serializers.SerializerMethodField()

    def get_download_url(self, obj) -> str:
        request = self.context.get("request")
        if request is not None and obj.download_url.startswith("/"):
            return request.build_absolute_uri(obj.download_url)
        return obj.download_url


class ActivationResponseSerializer(serializers.Serializer):
    """Serializer for activate response."""

    license_key = serializers.CharField()
    device_id = serializers.UUIDField()
    product_id = serializers.UUIDField(allow_null=True)
    product_name = serializers.CharField()
    expires_at = serializers.CharField()
    policies = PolicySerializer(many=True)
    product_files = ProductFileSerializer(many=True)


class ValidationResponseSerializer(serializers.Serializer):
    """Serializer for validate response."""

    license_key = serializers.CharField()
    valid = serializers.BooleanField()
    device_id = serializers.UUIDField()
    expires_at = serializers.CharField()
    policies = PolicySerializer(many=True)
    product_files = ProductFileSerializer(many=True)
