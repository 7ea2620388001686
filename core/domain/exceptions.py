"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Every concrete error belongs to
exactly one category (NotFound, Conflict, Forbidden, Expired,
InvalidInput, Internal) which the API layer maps to a status code.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class NotFoundError(DomainException):
    """A referenced license, device, policy or admin does not exist."""


class ConflictError(DomainException):
    """The request collides with current state (slot exhausted, duplicate)."""


class ForbiddenError(DomainException):
    """Scope or role does not allow the operation."""


class ExpiredError(DomainException):
    """The license is past its expiry date."""


class InvalidInputError(DomainException):
    """Malformed input such as a bad date or unparseable token fields."""


class InternalError(DomainException):
    """Storage or other unexpected failure."""


# Not found


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class DeviceNotFoundError(NotFoundError):
    """Raised when a device activation is not found."""

    def __init__(self, message: str = "Device not found"):
        super().__init__(message, code="DEVICE_NOT_FOUND")


class PolicyNotFoundError(NotFoundError):
    """Raised when a policy is not found."""

    def __init__(self, message: str = "Policy not found"):
        super().__init__(message, code="POLICY_NOT_FOUND")


class ProductNotFoundError(NotFoundError):
    """Raised when a product is not found."""

    def __init__(self, message: str = "Product not found"):
        super().__init__(message, code="PRODUCT_NOT_FOUND")


class FileAssetNotFoundError(NotFoundError):
    """Raised when a downloadable file is not found."""

    def __init__(self, message: str = "File not found"):
        super().__init__(message, code="FILE_NOT_FOUND")


class AdminNotFoundError(NotFoundError):
    """Raised when an admin account is not found."""

    def __init__(self, message: str = "Admin not found"):
        super().__init__(message, code="ADMIN_NOT_FOUND")


# Conflict


class DeviceLimitReachedError(ConflictError):
    """Raised when every device slot of a license is in use."""

    def __init__(self, message: str = "Maximum number of devices reached for this license"):
        super().__init__(message, code="DEVICE_LIMIT_REACHED")


class DeviceAlreadyActiveError(ConflictError):
    """Raised when reactivating a device that is already active."""

    def __init__(self, message: str = "Device is already active"):
        super().__init__(message, code="DEVICE_ALREADY_ACTIVE")


class MaxDevicesBelowActiveCountError(ConflictError):
    """Raised when max_devices would drop below the active device count."""

    def __init__(self, active_count: int):
        super().__init__(
            f"max_devices cannot be lower than the {active_count} currently active device(s)",
            code="MAX_DEVICES_BELOW_ACTIVE_COUNT",
        )
        self.active_count = active_count


class DuplicateResourceError(ConflictError):
    """Raised when a unique name is already taken."""

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message, code="DUPLICATE_RESOURCE")


# Forbidden


class LicenseInactiveError(ForbiddenError):
    """Raised when a license has been revoked or is otherwise not active."""

    def __init__(self, message: str = "License is not active"):
        super().__init__(message, code="LICENSE_INACTIVE")


class DeviceNotActivatedError(ForbiddenError):
    """Raised when validating a device that has no active activation."""

    def __init__(self, message: str = "Device not activated"):
        super().__init__(message, code="DEVICE_NOT_ACTIVATED")


class ResourceAccessDeniedError(ForbiddenError):
    """Raised when the admin's resource scope hides the resource."""

    def __init__(self, message: str = "You do not have access to this resource"):
        super().__init__(message, code="RESOURCE_ACCESS_DENIED")


class InsufficientRoleError(ForbiddenError):
    """Raised when the admin's role does not permit the operation."""

    def __init__(self, message: str = "Insufficient role for this operation"):
        super().__init__(message, code="INSUFFICIENT_ROLE")


class InvalidDownloadTokenError(ForbiddenError):
    """Raised for any expired or tampered download link."""

    def __init__(self, message: str = "Invalid or expired download link"):
        super().__init__(message, code="INVALID_DOWNLOAD_LINK")


# Expired


class LicenseExpiredError(ExpiredError):
    """Raised when a license has expired."""

    def __init__(self, message: str = "License has expired"):
        super().__init__(message, code="LICENSE_EXPIRED")


# Invalid input


class InvalidDateError(InvalidInputError):
    """Raised when a date string cannot be parsed."""

    def __init__(self, value: str):
        super().__init__(
            f"Invalid date '{value}'. Use YYYY-MM-DD or RFC3339",
            code="INVALID_DATE",
        )


class InvalidDownloadRequestError(InvalidInputError):
    """Raised when download signature fields are missing or malformed."""

    def __init__(self, message: str = "Missing or malformed download signature"):
        super().__init__(message, code="INVALID_DOWNLOAD_REQUEST")


class InvalidResourceTypeError(InvalidInputError):
    """Raised for an unknown resource type."""

    def __init__(self, value: str):
        super().__init__(f"Unknown resource type '{value}'", code="INVALID_RESOURCE_TYPE")


# Internal


class StorageError(InternalError):
    """Raised when the storage layer fails."""

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message, code="STORAGE_ERROR")
