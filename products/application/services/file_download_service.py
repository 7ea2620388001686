"""
Signed file downloads.
"""
import logging
import uuid
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional, Tuple

from django.conf import settings
from django.urls import reverse

from core.domain.exceptions import FileAssetNotFoundError, InvalidDownloadTokenError
from core.metrics import download_link_failures_total
from products.domain.catalog import StoredFile
from products.domain.download_tokens import DownloadTokenSigner
from products.ports.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


def get_download_signer() -> DownloadTokenSigner:
    """Build a signer from settings."""
    return DownloadTokenSigner(
        settings.DOWNLOAD_URL_SECRET,
        default_ttl=timedelta(seconds=settings.DOWNLOAD_URL_TTL_SECONDS),
    )


def signed_download_path(signer: DownloadTokenSigner, file_id: uuid.UUID) -> str:
    """Path and query of a freshly signed download link for ``file_id``."""
    token = signer.issue(file_id)
    path = reverse("client:download-file", kwargs={"file_id": file_id})
    return f"{path}?{token.query_string()}"


class FileDownloadService:
    """Verifies a signed link and locates the file it grants."""

    def __init__(
        self,
        catalog_repository: CatalogRepository,
        signer: Optional[DownloadTokenSigner] = None,
        storage_root: Optional[Path] = None,
    ):
        self.catalog_repository = catalog_repository
        self.signer = signer or get_download_signer()
        self.storage_root = Path(storage_root or settings.FILE_STORAGE_ROOT)

    async def open(
        self, file_id: uuid.UUID, expires: Any, nonce: Any, signature: Any
    ) -> Tuple[StoredFile, Path]:
        """
        Verify the link, then resolve the file on disk.

        The signature is checked before any lookup, so an invalid link never
        reveals whether the file exists.

        Returns:
            Tuple of (file metadata, absolute path)

        Raises:
            InvalidDownloadRequestError: If link fields are missing or malformed
            InvalidDownloadTokenError: If the link is expired or tampered with
            FileAssetNotFoundError: If the file is gone
        """
        try:
            self.signer.verify(file_id, expires, nonce, signature)
        except InvalidDownloadTokenError:
            download_link_failures_total.inc()
            logger.warning("Rejected download link", extra={"file_id": str(file_id)})
            raise

        stored = await self.catalog_repository.find_file(file_id)
        if stored is None:
            raise FileAssetNotFoundError()

        root = self.storage_root.resolve()
        path = (root / stored.storage_path).resolve()
        if root not in path.parents or not path.is_file():
            logger.error("File asset %s missing from storage", file_id)
            raise FileAssetNotFoundError()
        return stored, path
