"""Product, ProductVariant and ProductImage tables.

Rules implemented at the store:
- ``name``, ``slug`` (products) and ``sku`` (variants) are unique.
- Price must be greater than zero (check constraint).
- Product -> Category uses PROTECT: a referenced category cannot be deleted.
- Variants and images use CASCADE: they are owned by their product and
  disappear with it.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.products.value_objects import PRODUCT_SIZES

SIZE_CHOICES = [(size, size) for size in PRODUCT_SIZES]

PRODUCT_NAME_UNIQUE = "products_name_unique"
PRODUCT_SLUG_UNIQUE = "products_slug_unique"
VARIANT_SKU_UNIQUE = "product_variants_sku_unique"


class ProductModel(BaseModel):
    """Persistence row for the Product aggregate root."""

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280)
    description = models.TextField(null=True, blank=True)  # noqa: DJ001
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    purchase_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    image_url = models.URLField(max_length=1024, null=True, blank=True)  # noqa: DJ001
    category = models.ForeignKey(
        "categories.CategoryModel",
        on_delete=models.PROTECT,
        related_name="products",
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["name"], name=PRODUCT_NAME_UNIQUE),
            models.UniqueConstraint(fields=["slug"], name=PRODUCT_SLUG_UNIQUE),
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.slug} - {self.name}"


class ProductVariantModel(BaseModel):
    """Persistence row for a ProductVariant (owned by a product)."""

    product = models.ForeignKey(
        ProductModel,
        on_delete=models.CASCADE,
        related_name="variants",
    )
    sku = models.CharField(max_length=64)
    size = models.CharField(max_length=3, choices=SIZE_CHOICES)
    stock = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    purchase_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )

    class Meta:
        db_table = "product_variants"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(fields=["sku"], name=VARIANT_SKU_UNIQUE),
            models.CheckConstraint(
                condition=models.Q(price__isnull=True) | models.Q(price__gt=0),
                name="product_variants_price_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.sku} ({self.size})"


class ProductImageModel(BaseModel):
    """Persistence row for a ProductImage (owned by a product)."""

    product = models.ForeignKey(
        ProductModel,
        on_delete=models.CASCADE,
        related_name="images",
    )
    url = models.URLField(max_length=1024)
    alt_text = models.CharField(max_length=255, null=True, blank=True)  # noqa: DJ001
    sort_order = models.IntegerField(default=0)
    is_primary = models.BooleanField(default=False)

    class Meta:
        db_table = "product_images"
        ordering = ["sort_order", "created_at"]

    def __str__(self) -> str:
        return self.url
