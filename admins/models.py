from admins.infrastructure.models import Admin, AdminApiToken, AdminResourceScope  # noqa: F401
