"""
Django implementation of CatalogRepository port.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from products.domain.catalog import (
    PolicySnapshot,
    ProductFileSnapshot,
    ProductSnapshot,
    StoredFile,
)
from products.infrastructure.models import FileAsset, Policy, Product, ProductFile
from products.ports.catalog_repository import CatalogRepository


class DjangoCatalogRepository(CatalogRepository):
    """Django ORM implementation of CatalogRepository."""

    @sync_to_async
    def find_product(self, product_id: uuid.UUID) -> Optional[ProductSnapshot]:
        model = Product.objects.filter(id=product_id).first()
        if model is None:
            return None
        return ProductSnapshot(id=model.id, name=model.name, owner_id=model.owner_id)

    @sync_to_async
    def find_policy(self, policy_id: uuid.UUID) -> Optional[PolicySnapshot]:
        model = Policy.objects.filter(id=policy_id).first()
        if model is None:
            return None
        return PolicySnapshot(
            id=model.id,
            policy_name=model.policy_name,
            policy_data=model.policy_data or {},
        )

    @sync_to_async
    def list_active_product_files(self, product_id: uuid.UUID) -> List[ProductFileSnapshot]:
        """
        List active files of a product ordered by sort order.

        Args:
            product_id: Product UUID

        Returns:
            List of ProductFileSnapshot
        """
        links = (
            ProductFile.objects.select_related("file")
            .filter(product_id=product_id, is_active=True)
            .order_by("sort_order", "created_at")
        )
        return [
            ProductFileSnapshot(
                id=link.id,
                file_id=link.file_id,
                label=link.label,
                description=link.description,
                file_name=link.file.original_name,
                file_size=link.file.file_size,
                mime_type=link.file.mime_type,
                checksum=link.file.checksum,
                sort_order=link.sort_order,
                delivery_url=link.delivery_url,
            )
            for link in links
        ]

    @sync_to_async
    def find_file(self, file_id: uuid.UUID) -> Optional[StoredFile]:
        model = FileAsset.objects.filter(id=file_id).first()
        if model is None:
            return None
        return StoredFile(
            id=model.id,
            original_name=model.original_name,
            storage_path=model.storage_path,
            mime_type=model.mime_type,
        )
