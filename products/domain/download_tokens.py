"""
Signed download tokens.

A token grants a download of one file until its expiry without any
session. Tokens are stateless: nothing is recorded when they are issued or
used, so a token can be replayed until it expires.
"""
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional, Union
from urllib.parse import urlencode

from core.domain.exceptions import InvalidDownloadRequestError, InvalidDownloadTokenError
from core.infrastructure.clock import Clock, system_clock

DEFAULT_TTL = timedelta(minutes=5)
NONCE_BYTES = 12  # 96 bits
PAYLOAD_SEPARATOR = "|"


@dataclass(frozen=True)
class SignedDownloadToken:
    """File ID, Unix expiry, nonce and hex HMAC-SHA256 signature."""

    file_id: str
    expires: int
    nonce: str
    signature: str

    def query_string(self) -> str:
        return urlencode({"exp": self.expires, "nonce": self.nonce, "sig": self.signature})


class DownloadTokenSigner:
    """Issues and verifies signed download tokens."""

    def __init__(
        self,
        secret: Union[str, bytes],
        clock: Optional[Clock] = None,
        default_ttl: timedelta = DEFAULT_TTL,
    ):
        if not secret:
            raise ValueError("A download URL secret is required")
        self._secret = secret.encode() if isinstance(secret, str) else secret
        self.clock = clock or system_clock
        self.default_ttl = default_ttl

    def issue(
        self, file_id: Any, ttl: Optional[Union[timedelta, int]] = None
    ) -> SignedDownloadToken:
        """
        Issue a token for ``file_id``.

        Args:
            file_id: File identifier
            ttl: Lifetime as a timedelta or seconds; non-positive or missing
                values use the default lifetime

        Returns:
            SignedDownloadToken
        """
        seconds = int(ttl.total_seconds()) if isinstance(ttl, timedelta) else int(ttl or 0)
        if seconds <= 0:
            seconds = int(self.default_ttl.total_seconds())

        expires = self.clock.unix() + seconds
        nonce = secrets.token_hex(NONCE_BYTES)
        return SignedDownloadToken(
            file_id=str(file_id),
            expires=expires,
            nonce=nonce,
            signature=self.sign(file_id, expires, nonce),
        )

    def sign(self, file_id: Any, expires: int, nonce: str) -> str:
        payload = PAYLOAD_SEPARATOR.join((str(file_id), str(expires), nonce))
        return hmac.new(self._secret, payload.encode(), hashlib.sha256).hexdigest()

    def verify(self, file_id: Any, expires: Any, nonce: Any, signature: Any) -> None:
        """
        Verify a token.

        Expiry and signature failures raise the same error so a caller
        cannot tell which check failed.

        Raises:
            InvalidDownloadRequestError: If a field is missing or malformed
            InvalidDownloadTokenError: If the token expired or the signature
                does not match
        """
        if not expires or not nonce or not signature:
            raise InvalidDownloadRequestError()
        try:
            expires_at = int(str(expires))
        except ValueError as e:
            raise InvalidDownloadRequestError() from e

        if self.clock.unix() > expires_at:
            raise InvalidDownloadTokenError()

        expected = self.sign(file_id, expires_at, str(nonce))
        if not hmac.compare_digest(expected.encode(), str(signature).encode()):
            raise InvalidDownloadTokenError()
