"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.  Reads
always prefetch ``variants`` and ``images`` so the mapper can rebuild
the whole aggregate without N+1 queries.  Missing rows (or malformed
ids) yield ``None``; integrity errors are translated into the product
exception taxonomy.
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from modules.products import mappers
from modules.products.entities import Product, ProductImage, ProductVariant
from modules.products.exceptions import DuplicateSKU, ProductAlreadyExists
from modules.products.filters import ProductFilter
from modules.products.models import (
    PRODUCT_NAME_UNIQUE,
    PRODUCT_SLUG_UNIQUE,
    VARIANT_SKU_UNIQUE,
    ProductImageModel,
    ProductModel,
    ProductVariantModel,
)
from modules.products.repositories.interfaces import IProductRepository
from shared.domain.exceptions import InvalidArgument

logger = structlog.get_logger(__name__)


def _aggregate_queryset():
    return ProductModel.objects.prefetch_related("variants", "images")


# SQLite reports the violated column rather than the constraint name.
_SQLITE_UNIQUE_COLUMNS = {
    "products.name": PRODUCT_NAME_UNIQUE,
    "products.slug": PRODUCT_SLUG_UNIQUE,
    "product_variants.sku": VARIANT_SKU_UNIQUE,
}
_SQLITE_UNIQUE = re.compile(r"^UNIQUE constraint failed: (\S+)$")


def _violated_constraint(exc: IntegrityError) -> str:
    """Name of the constraint behind ``exc``, or ``""`` when unknown."""
    diag = getattr(exc.__cause__, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint
    match = _SQLITE_UNIQUE.match(str(exc))
    if match:
        return _SQLITE_UNIQUE_COLUMNS.get(match.group(1), "")
    if str(exc) == "FOREIGN KEY constraint failed":
        return "_fk_"
    return ""


def _translate_integrity_error(exc: IntegrityError, product: Product) -> Exception:
    """Map a database constraint violation to a domain error."""
    constraint = _violated_constraint(exc)
    if constraint == VARIANT_SKU_UNIQUE:
        return DuplicateSKU("A variant SKU is already registered.")
    if constraint == PRODUCT_SLUG_UNIQUE:
        return ProductAlreadyExists(
            f"A product with slug '{product.slug}' already exists."
        )
    if constraint == PRODUCT_NAME_UNIQUE:
        return ProductAlreadyExists(f"Product '{product.name}' already exists.")
    if "_fk_" in constraint:
        return InvalidArgument(f"Category {product.category_id} does not exist.")
    return InvalidArgument(f"Product '{product.name}' violates a data constraint.")


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Product]:
        """List products, optionally narrowed by ``ProductFilter`` parameters.

        Examples of valid filters::

            {"category": "<uuid>"}
            {"name": "shirt", "size": "M", "max_price": "50"}
        """
        queryset = _aggregate_queryset()
        if filters:
            filterset = ProductFilter(filters, queryset=queryset)
            if not filterset.is_valid():
                raise InvalidArgument(f"Invalid filters: {dict(filterset.errors)}")
            queryset = filterset.qs
        return [mappers.to_entity(row) for row in queryset]

    def find_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            row = _aggregate_queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        return mappers.to_entity(row) if row else None

    def find_by_slug(self, slug: str) -> Optional[Product]:
        row = _aggregate_queryset().filter(slug=slug).first()
        return mappers.to_entity(row) if row else None

    def find_by_name(self, name: str) -> Optional[Product]:
        row = _aggregate_queryset().filter(name=name).first()
        return mappers.to_entity(row) if row else None

    def find_variant_by_sku(self, sku: str) -> Optional[ProductVariant]:
        row = ProductVariantModel.objects.filter(sku=sku).first()
        return mappers.variant_to_entity(row) if row else None

    # ------------------------------------------------------------------
    # Aggregate writes
    # ------------------------------------------------------------------

    def create(self, entity: Product) -> Product:
        """Insert the product with its variants and images in one transaction."""
        try:
            with transaction.atomic():
                row = ProductModel.objects.create(**mappers.to_persistence(entity))
                ProductVariantModel.objects.bulk_create(
                    ProductVariantModel(product=row, **mappers.variant_to_persistence(v))
                    for v in entity.variants
                )
                ProductImageModel.objects.bulk_create(
                    ProductImageModel(product=row, **mappers.image_to_persistence(i))
                    for i in entity.images
                )
        except IntegrityError as exc:
            logger.warning("product.integrity_error", name=entity.name, error=str(exc))
            raise _translate_integrity_error(exc, entity) from exc

        logger.info(
            "product.saved",
            product_id=str(entity.id),
            variant_count=len(entity.variants),
            image_count=len(entity.images),
        )
        return self.find_by_id(str(entity.id))

    def update(self, entity: Product) -> Product:
        """Persist scalar fields only; variants and images are left untouched."""
        fields = mappers.to_persistence(entity)
        fields.pop("id")
        fields["updated_at"] = timezone.now()
        try:
            with transaction.atomic():
                updated = ProductModel.objects.filter(id=entity.id).update(**fields)
        except IntegrityError as exc:
            logger.warning("product.integrity_error", name=entity.name, error=str(exc))
            raise _translate_integrity_error(exc, entity) from exc
        if not updated:
            raise ProductModel.DoesNotExist(f"Product {entity.id} not found.")

        logger.info("product.saved", product_id=str(entity.id))
        return self.find_by_id(str(entity.id))

    def delete(self, id: str) -> bool:
        """Delete a product and (via CASCADE) its variants and images.

        Returns ``False`` if no product exists with the given ID.
        """
        try:
            row = ProductModel.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return False
        if not row:
            return False
        with transaction.atomic():
            _, deleted = row.delete()
        logger.info(
            "product.deleted",
            product_id=str(id),
            variants_deleted=deleted.get(ProductVariantModel._meta.label, 0),
            images_deleted=deleted.get(ProductImageModel._meta.label, 0),
        )
        return True

    # ------------------------------------------------------------------
    # Owned children
    # ------------------------------------------------------------------

    def add_variant(self, product_id: str, variant: ProductVariant) -> ProductVariant:
        try:
            with transaction.atomic():
                row = ProductVariantModel.objects.create(
                    product_id=product_id, **mappers.variant_to_persistence(variant)
                )
        except IntegrityError as exc:
            logger.warning("product.duplicate_sku", sku=variant.sku)
            raise DuplicateSKU(f"SKU '{variant.sku}' is already registered.") from exc
        logger.info("product.variant_added", product_id=str(product_id), sku=row.sku)
        return mappers.variant_to_entity(row)

    def remove_variant(self, product_id: str, variant_id: str) -> bool:
        try:
            deleted, _ = ProductVariantModel.objects.filter(
                product_id=product_id, id=variant_id
            ).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info(
                "product.variant_removed",
                product_id=str(product_id),
                variant_id=str(variant_id),
            )
        return bool(deleted)

    @transaction.atomic
    def add_image(self, product_id: str, image: ProductImage) -> ProductImage:
        if image.is_primary:
            ProductImageModel.objects.filter(
                product_id=product_id, is_primary=True
            ).update(is_primary=False)
        row = ProductImageModel.objects.create(
            product_id=product_id, **mappers.image_to_persistence(image)
        )
        logger.info(
            "product.image_added",
            product_id=str(product_id),
            image_id=str(row.id),
            is_primary=row.is_primary,
        )
        return mappers.image_to_entity(row)

    def remove_image(self, product_id: str, image_id: str) -> bool:
        try:
            deleted, _ = ProductImageModel.objects.filter(
                product_id=product_id, id=image_id
            ).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info(
                "product.image_removed",
                product_id=str(product_id),
                image_id=str(image_id),
            )
        return bool(deleted)
