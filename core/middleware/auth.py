"""
Admin token authentication middleware.

Admin API requests must carry a token issued to an admin account. Client
endpoints are not authenticated here: the license key in the request body
is their credential, and downloads are authorized by a signed link.
"""

import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from admins.infrastructure.models import AdminApiToken
from admins.infrastructure.repositories.django_admin_repository import DjangoAdminRepository

logger = logging.getLogger(__name__)

ADMIN_API_PREFIX = "/api/v1/admin/"


def _unauthorized(message: str) -> JsonResponse:
    return JsonResponse(
        {"error": {"code": "AUTHENTICATION_FAILED", "message": message}},
        status=401,
    )


class AdminTokenAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for admin API authentication.

    This middleware:
    1. Reads the token from the X-Admin-Token header (or a Bearer header)
    2. Looks it up by SHA-256 hash and rejects unknown or expired tokens
    3. Attaches the admin, with its current role, as ``request.admin``
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not request.path.startswith(ADMIN_API_PREFIX):
            return None

        raw_token = request.headers.get(settings.ADMIN_TOKEN_HEADER)
        if not raw_token:
            authorization = request.headers.get("Authorization", "")
            if authorization.startswith("Bearer "):
                raw_token = authorization[len("Bearer "):]

        if not raw_token:
            return _unauthorized(f"Missing admin token. Provide {settings.ADMIN_TOKEN_HEADER} header.")

        # pylint: disable=no-member
        token = (
            AdminApiToken.objects.select_related("admin")
            .filter(key_hash=AdminApiToken.hash_key(raw_token))
            .first()
        )
        if token is None:
            logger.warning("Invalid admin token attempted: %s...", raw_token[:8])
            return _unauthorized("Invalid admin token")

        if not token.is_valid():
            logger.warning("Expired admin token attempted: %s...", token.key_prefix)
            return _unauthorized("Admin token expired")

        token.mark_used()
        request.admin = DjangoAdminRepository.to_domain(token.admin)  # type: ignore
        return None
