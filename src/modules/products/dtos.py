"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).  Wire payloads use camelCase
(``purchasePrice``, ``categoryId``); snake_case names are accepted too.

- ``CreateVariantDTO``: a variant in a creation request, or a variant
  added later through ``POST /products/{id}/variants``.
- ``CreateImageDTO``: an image in a creation request, or one added later.
- ``CreateProductDTO``: input for product creation (nested children).
- ``UpdateProductDTO``: partial update of scalar fields.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Annotated, List, Optional, Self
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from modules.products.exceptions import InvalidSize
from modules.products.value_objects import ProductSize

_MIN_PRICE = Decimal("0.01")
_HAS_SLUG_CHARACTER = re.compile(r"[A-Za-z0-9_]")
_MAX_URL_LENGTH = 1024


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def _check_name(v: str) -> str:
    if not v:
        raise ValueError("Product name is required.")
    if not _HAS_SLUG_CHARACTER.search(v):
        raise ValueError("Product name must contain at least one letter or digit.")
    return v


def _check_price(v: Decimal) -> Decimal:
    if v < _MIN_PRICE:
        raise ValueError("Price must be at least 0.01.")
    return v


def _url_to_str(v: HttpUrl) -> str:
    url = str(v)
    if len(url) > _MAX_URL_LENGTH:
        raise ValueError(f"URL must be at most {_MAX_URL_LENGTH} characters.")
    return url


# Parsed as an http(s) URL, stored on entities as a plain string.
ImageUrl = Annotated[HttpUrl, AfterValidator(_url_to_str)]


# ---------------------------------------------------------------------------
# Children
# ---------------------------------------------------------------------------


class CreateVariantDTO(_CamelModel):
    """Immutable DTO for one product variant.

    Validates:
    - ``sku`` is a non-empty string (kept case-sensitive).
    - ``size`` is a catalog size; it is normalised (``" m "`` -> ``"M"``).
    - ``stock`` is non-negative.
    """

    sku: str = Field(max_length=64)
    size: str
    stock: int = Field(default=0, ge=0)
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    purchase_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("SKU must not be empty.")
        return v

    @field_validator("size")
    @classmethod
    def size_must_be_catalog_value(cls, v: str) -> str:
        try:
            return ProductSize.from_value(v).value
        except InvalidSize as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("price")
    @classmethod
    def price_override_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return None if v is None else _check_price(v)


class CreateImageDTO(_CamelModel):
    """Immutable DTO for one gallery image."""

    url: ImageUrl
    alt_text: Optional[str] = Field(default=None, max_length=255)
    sort_order: int = 0
    is_primary: bool = False


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------


class CreateProductDTO(_CamelModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``price`` is at least 0.01.
    - ``name`` yields a non-empty slug.
    - SKUs are unique within the request.
    - At most one image is flagged primary.
    """

    name: str = Field(max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(max_digits=10, decimal_places=2)
    purchase_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category_id: UUID
    image_url: Optional[ImageUrl] = None
    variants: List[CreateVariantDTO] = Field(default_factory=list)
    images: List[CreateImageDTO] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_must_be_sluggable(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @model_validator(mode="after")
    def no_duplicate_skus(self) -> Self:
        skus = [variant.sku for variant in self.variants]
        if len(skus) != len(set(skus)):
            raise ValueError("Duplicate SKUs are not allowed in the same product.")
        return self

    @model_validator(mode="after")
    def single_primary_image(self) -> Self:
        if sum(1 for image in self.images if image.is_primary) > 1:
            raise ValueError("Only one image can be primary.")
        return self


class UpdateProductDTO(_CamelModel):
    """Immutable DTO for partial product updates.

    Only the fields present in the payload are applied; use
    ``model_dump(exclude_unset=True)`` to get them.  ``description``,
    ``purchasePrice`` and ``imageUrl`` may be set to ``null`` to clear
    them; ``name``, ``price`` and ``categoryId`` may not.
    Any other key, including ``variants`` and ``images``, is rejected;
    children change through their own endpoints.
    """

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    purchase_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[ImageUrl] = None
    category_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def name_must_be_sluggable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Product name cannot be null.")
        return _check_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            raise ValueError("Price cannot be null.")
        return _check_price(v)

    @field_validator("category_id")
    @classmethod
    def category_must_not_be_null(cls, v: Optional[UUID]) -> Optional[UUID]:
        if v is None:
            raise ValueError("categoryId cannot be null.")
        return v

    def changes(self) -> dict:
        """Scalar fields supplied by the caller, keyed by entity attribute."""
        return self.model_dump(exclude_unset=True)
