"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups required by the
unique name/slug/SKU rules and with narrow operations for the owned
children: ``update`` only persists scalar fields, so variants and images
are written through ``add_*`` / ``remove_*``.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.entities import Product, ProductImage, ProductVariant


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def find_by_slug(self, slug: str) -> Optional[Product]:
        """Retrieve a product by its unique slug."""

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Product]:
        """Retrieve a product by its unique name."""

    @abstractmethod
    def find_variant_by_sku(self, sku: str) -> Optional[ProductVariant]:
        """Retrieve any product's variant by its globally unique SKU."""

    @abstractmethod
    def add_variant(self, product_id: str, variant: ProductVariant) -> ProductVariant:
        """Persist a new variant under the product."""

    @abstractmethod
    def remove_variant(self, product_id: str, variant_id: str) -> bool:
        """Delete one of the product's variants."""

    @abstractmethod
    def add_image(self, product_id: str, image: ProductImage) -> ProductImage:
        """Persist a new image; a primary image demotes the current primary."""

    @abstractmethod
    def remove_image(self, product_id: str, image_id: str) -> bool:
        """Delete one of the product's images."""
