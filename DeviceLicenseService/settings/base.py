"""
Base Django settings for DeviceLicenseService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-q2v!m8k#x0_7r@d4h$w9p+e1c^n6t&b3j(z5l)a-f%y*s=u"
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "DeviceLicenseService.apps.DeviceLicenseServiceConfig",
    "core",
    "admins",
    "products",
    "licenses",
    "activations",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.AdminTokenAuthenticationMiddleware",
]

ROOT_URLCONF = "DeviceLicenseService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "license_service"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Device License Service API",
    "DESCRIPTION": (
        "Issues licenses, binds them to a bounded number of devices, "
        "and scopes administrator access per resource."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "Client API", "description": "Device activation, validation and downloads"},
        {"name": "Admin API", "description": "License, device and permission administration"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1"),
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

# Admin authentication
ADMIN_TOKEN_HEADER = "X-Admin-Token"
ADMIN_TOKEN_TTL_DAYS = int(os.environ.get("ADMIN_TOKEN_TTL_DAYS", "30"))

# License engine
LICENSE_TIME_ZONE = os.environ.get("LICENSE_TIME_ZONE", "Asia/Seoul")
DOWNLOAD_URL_SECRET = os.environ.get("DOWNLOAD_URL_SECRET", "change-this-download-url-secret")
DOWNLOAD_URL_TTL_SECONDS = int(os.environ.get("DOWNLOAD_URL_TTL_SECONDS", "300"))
FILE_STORAGE_ROOT = Path(os.environ.get("FILE_STORAGE_ROOT", BASE_DIR / "uploads"))
# Hourly by default; never sub-minute
LICENSE_EXPIRY_SWEEP_INTERVAL = max(
    60, int(os.environ.get("LICENSE_EXPIRY_SWEEP_INTERVAL", "3600"))
)

# Celery
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://127.0.0.1:6379/0")
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TIMEZONE = LICENSE_TIME_ZONE
CELERY_BEAT_SCHEDULE = {
    "expire-overdue-licenses": {
        "task": "core.tasks.expire_licenses_task",
        "schedule": float(LICENSE_EXPIRY_SWEEP_INTERVAL),
    },
}

# Observability
OBSERVABILITY_ENABLED = os.environ.get("OBSERVABILITY_ENABLED", "true").lower() == "true"
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
