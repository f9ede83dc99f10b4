"""Mapping between ORM rows and Product aggregate entities.

``to_entity`` is the persistence boundary: every stored value goes
through the entity constructors, so a row holding an unknown size or a
non-positive price raises ``InvalidArgument`` instead of producing an
invalid aggregate.  Callers are expected to have prefetched
``variants`` and ``images``.
"""

from __future__ import annotations

from typing import Any, Dict

from modules.products.entities import Product, ProductImage, ProductVariant
from modules.products.models import ProductImageModel, ProductModel, ProductVariantModel
from modules.products.value_objects import ProductSize


def variant_to_entity(row: ProductVariantModel) -> ProductVariant:
    return ProductVariant(
        id=row.id,
        sku=row.sku,
        size=ProductSize.from_value(row.size),
        stock=row.stock,
        price=row.price,
        purchase_price=row.purchase_price,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def image_to_entity(row: ProductImageModel) -> ProductImage:
    return ProductImage(
        id=row.id,
        url=row.url,
        alt_text=row.alt_text,
        sort_order=row.sort_order,
        is_primary=row.is_primary,
    )


def to_entity(row: ProductModel) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        slug=row.slug,
        description=row.description,
        price=row.price,
        purchase_price=row.purchase_price,
        image_url=row.image_url,
        category_id=row.category_id,
        images=[image_to_entity(image) for image in row.images.all()],
        variants=[variant_to_entity(variant) for variant in row.variants.all()],
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_persistence(product: Product) -> Dict[str, Any]:
    """Flat scalar columns of the product row (children are written separately)."""
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "description": product.description,
        "price": product.price,
        "purchase_price": product.purchase_price,
        "image_url": product.image_url,
        "category_id": product.category_id,
    }


def variant_to_persistence(variant: ProductVariant) -> Dict[str, Any]:
    return {
        "id": variant.id,
        "sku": variant.sku,
        "size": str(variant.size),
        "stock": variant.stock,
        "price": variant.price,
        "purchase_price": variant.purchase_price,
    }


def image_to_persistence(image: ProductImage) -> Dict[str, Any]:
    return {
        "id": image.id,
        "url": image.url,
        "alt_text": image.alt_text,
        "sort_order": image.sort_order,
        "is_primary": image.is_primary,
    }
