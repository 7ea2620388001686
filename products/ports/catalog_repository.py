"""
Catalog repository port (interface).

Read access to products, policies and files for the activation and
download flows.
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from products.domain.catalog import (
    PolicySnapshot,
    ProductFileSnapshot,
    ProductSnapshot,
    StoredFile,
)


class CatalogRepository(ABC):
    """Abstract repository for catalog reads."""

    @abstractmethod
    async def find_product(self, product_id: uuid.UUID) -> Optional[ProductSnapshot]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            ProductSnapshot or None if not found
        """

    @abstractmethod
    async def find_policy(self, policy_id: uuid.UUID) -> Optional[PolicySnapshot]:
        """
        Find a policy by ID.

        Args:
            policy_id: Policy UUID

        Returns:
            PolicySnapshot or None if not found
        """

    @abstractmethod
    async def list_active_product_files(self, product_id: uuid.UUID) -> List[ProductFileSnapshot]:
        """
        List active files of a product ordered by sort order.

        Args:
            product_id: Product UUID

        Returns:
            List of ProductFileSnapshot
        """

    @abstractmethod
    async def find_file(self, file_id: uuid.UUID) -> Optional[StoredFile]:
        """
        Find a file asset by ID.

        Args:
            file_id: File asset UUID

        Returns:
            StoredFile or None if not found
        """
