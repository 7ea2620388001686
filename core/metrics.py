"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_created_total = Counter(
    "licenses_created_total",
    "Total licenses created",
)

licenses_revoked_total = Counter(
    "licenses_revoked_total",
    "Total licenses revoked",
)

licenses_expired_total = Counter(
    "licenses_expired_total",
    "Total licenses transitioned to expired by the sweeper",
)

# Device metrics
device_activations_total = Counter(
    "device_activations_total",
    "Device activation attempts",
    ["result"],
)

device_validations_total = Counter(
    "device_validations_total",
    "Device validation attempts",
    ["result"],
)

# Download metrics
download_link_failures_total = Counter(
    "download_link_failures_total",
    "Rejected signed download links",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
