"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository`` and category lookups
to the injected ``ICategoryRepository``.

Business rules enforced here:
- Product name (and therefore slug) must be unique.
- SKUs are unique across the whole catalog.
- A product must reference an existing category.
- Price must be greater than zero (DTO and entity).
- Variants and images change only through their dedicated commands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Mapping, Optional

import structlog
import uuid6
from django.db import transaction

from modules.products.entities import Product, ProductImage, ProductVariant
from modules.products.exceptions import (
    DuplicateSKU,
    ImageNotFound,
    ProductAlreadyExists,
    ProductNotFound,
    VariantNotFound,
)
from shared.domain.exceptions import InvalidArgument
from shared.domain.slugs import generate_slug

if TYPE_CHECKING:
    from modules.categories.repositories.interfaces import ICategoryRepository
    from modules.products.dtos import (
        CreateImageDTO,
        CreateProductDTO,
        CreateVariantDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def _build_variant(dto: CreateVariantDTO) -> ProductVariant:
    return ProductVariant(
        id=uuid6.uuid7(),
        sku=dto.sku,
        size=dto.size,
        stock=dto.stock,
        price=dto.price,
        purchase_price=dto.purchase_price,
    )


def _build_image(dto: CreateImageDTO) -> ProductImage:
    return ProductImage(
        id=uuid6.uuid7(),
        url=dto.url,
        alt_text=dto.alt_text,
        sort_order=dto.sort_order,
        is_primary=dto.is_primary,
    )


class ProductService:
    """Application service for Product use-cases.

    Receives its repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        category_repository: ICategoryRepository,
    ) -> None:
        self._repo = repository
        self._categories = category_repository

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _ensure_category_exists(self, category_id: Any) -> None:
        if not self._categories.find_by_id(str(category_id)):
            logger.warning("product.unknown_category", category_id=str(category_id))
            raise InvalidArgument(f"Category {category_id} does not exist.")

    def _ensure_name_available(self, product: Product) -> None:
        existing = self._repo.find_by_name(product.name)
        if existing and existing.id != product.id:
            logger.warning("product.duplicate_name", name=product.name)
            raise ProductAlreadyExists(f"Product '{product.name}' already exists.")

        existing = self._repo.find_by_slug(product.slug)
        if existing and existing.id != product.id:
            logger.warning("product.duplicate_slug", name=product.name, slug=product.slug)
            raise ProductAlreadyExists(
                f"Product '{product.name}' has slug '{product.slug}', "
                f"already used by '{existing.name}'."
            )

    def _ensure_sku_available(self, sku: str) -> None:
        if self._repo.find_variant_by_sku(sku):
            logger.warning("product.duplicate_sku", sku=sku)
            raise DuplicateSKU(f"SKU '{sku}' is already registered.")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a product together with its initial variants and images.

        Raises:
            InvalidArgument: if the category does not exist.
            ProductAlreadyExists: if the name or derived slug is taken.
            DuplicateSKU: if any SKU is already registered.
        """
        log = logger.bind(name=dto.name)

        self._ensure_category_exists(dto.category_id)

        product = Product(
            id=uuid6.uuid7(),
            name=dto.name,
            slug=generate_slug(dto.name),
            description=dto.description,
            price=dto.price,
            purchase_price=dto.purchase_price,
            image_url=dto.image_url,
            category_id=dto.category_id,
        )
        self._ensure_name_available(product)

        for variant_dto in dto.variants:
            self._ensure_sku_available(variant_dto.sku)
            product.add_variant(_build_variant(variant_dto))
        for image_dto in dto.images:
            product.add_image(_build_image(image_dto))

        product = self._repo.create(product)
        log.info(
            "product.created",
            product_id=str(product.id),
            slug=product.slug,
            variant_count=len(product.variants),
        )
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Replace the supplied scalar fields of an existing product.

        Raises:
            ProductNotFound: if the product does not exist.
            InvalidArgument: if a new category does not exist.
            ProductAlreadyExists: if the new name is taken.
        """
        product = self.get_product(id)
        log = logger.bind(product_id=str(id))

        changes = dto.changes()
        if not changes:
            return product

        product.apply_update(changes)
        if "category_id" in changes:
            self._ensure_category_exists(product.category_id)
        if "name" in changes:
            self._ensure_name_available(product)

        product = self._repo.update(product)
        log.info("product.updated", fields=sorted(changes))
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Delete a product; its variants and images go with it.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=str(id))

    @transaction.atomic
    def add_variant(self, id: str, dto: CreateVariantDTO) -> ProductVariant:
        """Attach a new variant to an existing product.

        Raises:
            ProductNotFound: if the product does not exist.
            DuplicateSKU: if the SKU is already registered anywhere.
        """
        product = self.get_product(id)
        variant = _build_variant(dto)
        product.add_variant(variant)
        self._ensure_sku_available(variant.sku)

        variant = self._repo.add_variant(str(product.id), variant)
        logger.info("product.variant_added", product_id=str(id), sku=variant.sku)
        return variant

    @transaction.atomic
    def remove_variant(self, id: str, variant_id: str) -> None:
        """Raises:
            ProductNotFound: if the product does not exist.
            VariantNotFound: if the variant does not belong to the product.
        """
        product = self.get_product(id)
        product.remove_variant(variant_id)
        if not self._repo.remove_variant(str(product.id), variant_id):
            raise VariantNotFound(f"Variant {variant_id} not found on product {id}.")

    @transaction.atomic
    def add_image(self, id: str, dto: CreateImageDTO) -> ProductImage:
        """Attach a gallery image.

        A primary image demotes the current primary one and becomes the
        product's ``image_url``.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self.get_product(id)
        previous_url = product.image_url

        image = _build_image(dto)
        product.add_image(image)
        image = self._repo.add_image(str(product.id), image)

        if product.image_url != previous_url:
            self._repo.update(product)
        logger.info(
            "product.image_added",
            product_id=str(id),
            image_id=str(image.id),
            is_primary=image.is_primary,
        )
        return image

    @transaction.atomic
    def remove_image(self, id: str, image_id: str) -> None:
        """Remove a gallery image, clearing ``image_url`` if it pointed at it.

        Raises:
            ProductNotFound: if the product does not exist.
            ImageNotFound: if the image does not belong to the product.
        """
        product = self.get_product(id)
        previous_url = product.image_url

        product.remove_image(image_id)
        if not self._repo.remove_image(str(product.id), image_id):
            raise ImageNotFound(f"Image {image_id} not found on product {id}.")
        if product.image_url != previous_url:
            self._repo.update(product)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Product]:
        """Return all products with their variants and images, optionally filtered."""
        return self._repo.find_all(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.find_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def get_product_by_slug(self, slug: str) -> Product:
        """Raises:
            ProductNotFound: if no product carries the slug.
        """
        product = self._repo.find_by_slug(slug)
        if not product:
            raise ProductNotFound(f"Product with slug '{slug}' not found.")
        return product
