"""Product aggregate: Product (root), ProductVariant and ProductImage.

Plain dataclasses, independent of the ORM.  The repository maps them to
and from ``modules.products.models``.

Invariants held in memory:
- ``Product.price`` is strictly positive.
- No two variants of one product share a SKU (``add_variant``).
- At most one image is primary; adding a primary image demotes the
  previous one and repoints ``image_url`` (``add_image``).
- Variant stock is a non-negative integer.

Name/slug/SKU uniqueness across the catalog is a store concern and is
checked by the service and the database, not here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional
from uuid import UUID

from modules.products.exceptions import DuplicateSKU, ImageNotFound, VariantNotFound
from modules.products.value_objects import ProductSize
from shared.domain.exceptions import InvalidArgument
from shared.domain.slugs import generate_slug

SCALAR_FIELDS = (
    "name",
    "description",
    "price",
    "purchase_price",
    "image_url",
    "category_id",
)


def _to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidArgument(f"{field_name} must be a number.") from exc


def _positive_price(value: Any, field_name: str = "price") -> Decimal:
    if value is None:
        raise InvalidArgument(f"{field_name} is required.")
    price = _to_decimal(value, field_name)
    if not price.is_finite() or price <= 0:
        raise InvalidArgument(f"{field_name} must be greater than zero.")
    return price


def _optional_price(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None:
        return None
    return _positive_price(value, field_name)


def _optional_cost(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None:
        return None
    cost = _to_decimal(value, field_name)
    if not cost.is_finite() or cost < 0:
        raise InvalidArgument(f"{field_name} cannot be negative.")
    return cost


@dataclass
class ProductVariant:
    """A size-specific stock-keeping unit owned by a Product."""

    id: UUID
    sku: str
    size: ProductSize
    stock: int = 0
    price: Optional[Decimal] = None
    purchase_price: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.size = ProductSize.from_value(self.size)
        if isinstance(self.stock, bool) or not isinstance(self.stock, int):
            raise InvalidArgument("stock must be an integer.")
        if self.stock < 0:
            raise InvalidArgument("stock cannot be negative.")
        self.price = _optional_price(self.price, "price")
        self.purchase_price = _optional_cost(self.purchase_price, "purchase_price")

    def effective_price(self, product_price: Decimal) -> Decimal:
        """Price charged for this variant: its override, else the product's."""
        return self.price if self.price is not None else product_price


@dataclass
class ProductImage:
    """A gallery entry owned by a Product."""

    id: UUID
    url: str
    alt_text: Optional[str] = None
    sort_order: int = 0
    is_primary: bool = False


@dataclass
class Product:
    """Product aggregate root."""

    id: UUID
    name: str
    slug: str
    description: Optional[str]
    price: Decimal
    purchase_price: Optional[Decimal]
    image_url: Optional[str]
    category_id: UUID
    images: List[ProductImage] = field(default_factory=list)
    variants: List[ProductVariant] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.price = _positive_price(self.price)
        self.purchase_price = _optional_cost(self.purchase_price, "purchase_price")
        self.images = sorted(self.images, key=lambda image: image.sort_order)
        self.variants = list(self.variants)

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    @property
    def total_stock(self) -> int:
        """Sum of all variants' stock; recomputed on every read."""
        return sum(variant.stock for variant in self.variants)

    def has_stock(self) -> bool:
        return self.total_stock > 0

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    def find_variant(self, variant_id: UUID | str) -> Optional[ProductVariant]:
        return next(
            (v for v in self.variants if str(v.id) == str(variant_id)), None
        )

    def add_variant(self, variant: ProductVariant) -> None:
        """Append a variant.

        Raises:
            DuplicateSKU: if a variant with the same SKU (exact match) exists.
        """
        if any(existing.sku == variant.sku for existing in self.variants):
            raise DuplicateSKU(
                f"SKU '{variant.sku}' already exists on product {self.id}."
            )
        self.variants.append(variant)

    def remove_variant(self, variant_id: UUID | str) -> ProductVariant:
        variant = self.find_variant(variant_id)
        if variant is None:
            raise VariantNotFound(
                f"Variant {variant_id} not found on product {self.id}."
            )
        self.variants.remove(variant)
        return variant

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    @property
    def primary_image(self) -> Optional[ProductImage]:
        return next((image for image in self.images if image.is_primary), None)

    def find_image(self, image_id: UUID | str) -> Optional[ProductImage]:
        return next((i for i in self.images if str(i.id) == str(image_id)), None)

    def add_image(self, image: ProductImage) -> None:
        """Add an image to the gallery, keeping it ordered by ``sort_order``.

        A primary image replaces the current primary one and becomes the
        product's ``image_url``.
        """
        if image.is_primary:
            for existing in self.images:
                existing.is_primary = False
            self.image_url = image.url
        self.images.append(image)
        self.images.sort(key=lambda i: i.sort_order)

    def remove_image(self, image_id: UUID | str) -> ProductImage:
        image = self.find_image(image_id)
        if image is None:
            raise ImageNotFound(f"Image {image_id} not found on product {self.id}.")
        self.images.remove(image)
        if image.is_primary and self.image_url == image.url:
            self.image_url = None
        return image

    # ------------------------------------------------------------------
    # Scalar fields
    # ------------------------------------------------------------------

    def rename(self, name: str) -> None:
        """Replace the name; the slug always follows it."""
        if not name or not name.strip():
            raise InvalidArgument("Product name is required.")
        self.name = name.strip()
        self.slug = generate_slug(self.name)

    def apply_update(self, changes: Mapping[str, Any]) -> None:
        """Replace the supplied scalar fields.

        Variants and images are never touched here; they change only
        through their dedicated methods.
        """
        unknown = set(changes) - set(SCALAR_FIELDS)
        if unknown:
            raise InvalidArgument(
                f"Cannot update field(s): {', '.join(sorted(unknown))}."
            )
        if "price" in changes:
            self.price = _positive_price(changes["price"])
        if "purchase_price" in changes:
            self.purchase_price = _optional_cost(
                changes["purchase_price"], "purchase_price"
            )
        if "name" in changes:
            self.rename(changes["name"])
        for name in ("description", "image_url", "category_id"):
            if name in changes:
                setattr(self, name, changes[name])
