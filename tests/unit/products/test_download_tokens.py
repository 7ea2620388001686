"""
Unit tests for signed download tokens.
"""

import uuid
from datetime import timedelta
from urllib.parse import parse_qs

import pytest

from core.domain.exceptions import InvalidDownloadRequestError, InvalidDownloadTokenError
from products.domain.download_tokens import DownloadTokenSigner

SECRET = "unit-test-secret"


def flip(value: str, index: int = 0) -> str:
    """Change one character of a hex or UUID string."""
    replacement = "0" if value[index] != "0" else "1"
    return value[:index] + replacement + value[index + 1:]


@pytest.fixture
def signer(clock):
    return DownloadTokenSigner(SECRET, clock=clock)


class TestDownloadTokenSigner:
    """Tests for DownloadTokenSigner."""

    def test_requires_secret(self):
        with pytest.raises(ValueError):
            DownloadTokenSigner("")

    def test_issue_uses_default_ttl(self, signer, clock):
        token = signer.issue(uuid.uuid4())

        assert token.expires == clock.unix() + 300
        assert len(token.nonce) == 24
        assert len(token.signature) == 64

    def test_issue_with_ttl(self, signer, clock):
        assert signer.issue(uuid.uuid4(), ttl=60).expires == clock.unix() + 60
        assert signer.issue(uuid.uuid4(), ttl=timedelta(minutes=2)).expires == clock.unix() + 120

    def test_non_positive_ttl_uses_default(self, signer, clock):
        assert signer.issue(uuid.uuid4(), ttl=0).expires == clock.unix() + 300
        assert signer.issue(uuid.uuid4(), ttl=-5).expires == clock.unix() + 300

    def test_nonces_are_unique(self, signer):
        file_id = uuid.uuid4()
        assert signer.issue(file_id).nonce != signer.issue(file_id).nonce

    def test_valid_until_expiry(self, signer, fake_time):
        """Test a token verifies up to and including its expiry second."""
        file_id = uuid.uuid4()
        token = signer.issue(file_id, ttl=60)

        signer.verify(file_id, token.expires, token.nonce, token.signature)
        fake_time.advance(seconds=60)
        signer.verify(file_id, str(token.expires), token.nonce, token.signature)

    def test_fails_after_expiry(self, signer, fake_time):
        file_id = uuid.uuid4()
        token = signer.issue(file_id, ttl=60)

        fake_time.advance(seconds=61)

        with pytest.raises(InvalidDownloadTokenError):
            signer.verify(file_id, token.expires, token.nonce, token.signature)

    def test_replay_is_allowed(self, signer):
        file_id = uuid.uuid4()
        token = signer.issue(file_id)

        for _ in range(3):
            signer.verify(file_id, token.expires, token.nonce, token.signature)

    @pytest.mark.parametrize("index", [0, 5, 23])
    def test_tampered_nonce_fails(self, signer, index):
        file_id = uuid.uuid4()
        token = signer.issue(file_id)

        with pytest.raises(InvalidDownloadTokenError):
            signer.verify(file_id, token.expires, flip(token.nonce, index), token.signature)

    @pytest.mark.parametrize("index", [0, 10, 35])
    def test_tampered_file_id_fails(self, signer, index):
        file_id = str(uuid.uuid4())
        token = signer.issue(file_id)

        with pytest.raises(InvalidDownloadTokenError):
            signer.verify(flip(file_id, index), token.expires, token.nonce, token.signature)

    @pytest.mark.parametrize("index", [0, 31, 63])
    def test_tampered_signature_fails(self, signer, index):
        file_id = uuid.uuid4()
        token = signer.issue(file_id)

        with pytest.raises(InvalidDownloadTokenError):
            signer.verify(file_id, token.expires, token.nonce, flip(token.signature, index))

    def test_extended_expiry_fails(self, signer):
        file_id = uuid.uuid4()
        token = signer.issue(file_id)

        with pytest.raises(InvalidDownloadTokenError):
            signer.verify(file_id, token.expires + 3600, token.nonce, token.signature)

    def test_other_secret_fails(self, signer, clock):
        file_id = uuid.uuid4()
        token = DownloadTokenSigner("another-secret", clock=clock).issue(file_id)

        with pytest.raises(InvalidDownloadTokenError):
            signer.verify(file_id, token.expires, token.nonce, token.signature)

    @pytest.mark.parametrize(
        "expires,nonce,signature",
        [
            (None, "abc", "def"),
            ("123", "", "def"),
            ("123", "abc", None),
            ("not-a-number", "abc", "def"),
        ],
    )
    def test_missing_or_malformed_fields(self, signer, expires, nonce, signature):
        with pytest.raises(InvalidDownloadRequestError):
            signer.verify(uuid.uuid4(), expires, nonce, signature)

    def test_query_string(self, signer):
        token = signer.issue(uuid.uuid4())

        params = parse_qs(token.query_string())

        assert params == {
            "exp": [str(token.expires)],
            "nonce": [token.nonce],
            "sig": [token.signature],
        }
