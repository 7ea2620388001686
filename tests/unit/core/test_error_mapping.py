"""
Unit tests for mapping domain errors to HTTP status codes.
"""

import pytest

from api.exceptions import error_body, status_for
from core.domain.exceptions import (
    AdminNotFoundError,
    DeviceAlreadyActiveError,
    DeviceLimitReachedError,
    DeviceNotActivatedError,
    DeviceNotFoundError,
    DomainException,
    InsufficientRoleError,
    InvalidDateError,
    InvalidDownloadRequestError,
    InvalidDownloadTokenError,
    LicenseExpiredError,
    LicenseInactiveError,
    LicenseNotFoundError,
    MaxDevicesBelowActiveCountError,
    ResourceAccessDeniedError,
    StorageError,
)


@pytest.mark.parametrize(
    "exc,status_code,code",
    [
        (LicenseNotFoundError(), 404, "LICENSE_NOT_FOUND"),
        (DeviceNotFoundError(), 404, "DEVICE_NOT_FOUND"),
        (AdminNotFoundError(), 404, "ADMIN_NOT_FOUND"),
        (DeviceLimitReachedError(), 409, "DEVICE_LIMIT_REACHED"),
        (DeviceAlreadyActiveError(), 409, "DEVICE_ALREADY_ACTIVE"),
        (MaxDevicesBelowActiveCountError(3), 409, "MAX_DEVICES_BELOW_ACTIVE_COUNT"),
        (LicenseExpiredError(), 403, "LICENSE_EXPIRED"),
        (LicenseInactiveError(), 403, "LICENSE_INACTIVE"),
        (DeviceNotActivatedError(), 403, "DEVICE_NOT_ACTIVATED"),
        (ResourceAccessDeniedError(), 403, "RESOURCE_ACCESS_DENIED"),
        (InsufficientRoleError(), 403, "INSUFFICIENT_ROLE"),
        (InvalidDownloadTokenError(), 403, "INVALID_DOWNLOAD_LINK"),
        (InvalidDateError("x"), 400, "INVALID_DATE"),
        (InvalidDownloadRequestError(), 400, "INVALID_DOWNLOAD_REQUEST"),
        (StorageError(), 500, "STORAGE_ERROR"),
    ],
)
def test_status_for(exc, status_code, code):
    assert status_for(exc) == status_code
    assert exc.code == code


def test_uncategorized_domain_exception_is_bad_request():
    assert status_for(DomainException("odd")) == 400


def test_error_body_shape():
    assert error_body("LICENSE_NOT_FOUND", "License not found") == {
        "error": {"code": "LICENSE_NOT_FOUND", "message": "License not found"}
    }
