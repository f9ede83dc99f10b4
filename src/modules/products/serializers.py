"""Product DRF serializers for API output.

The serializers operate at the Interface layer (API Views) and render
the Product aggregate entities with camelCase keys.  Input is validated
by the pydantic DTOs in ``dtos.py`` before it reaches the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers


class ProductVariantSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    sku = serializers.CharField(read_only=True)
    size = serializers.CharField(read_only=True)
    stock = serializers.IntegerField(read_only=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True, allow_null=True
    )
    purchasePrice = serializers.DecimalField(
        source="purchase_price",
        max_digits=10,
        decimal_places=2,
        read_only=True,
        allow_null=True,
    )


class ProductImageSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    url = serializers.CharField(read_only=True)
    altText = serializers.CharField(source="alt_text", read_only=True, allow_null=True)
    sortOrder = serializers.IntegerField(source="sort_order", read_only=True)
    isPrimary = serializers.BooleanField(source="is_primary", read_only=True)


class ProductSerializer(serializers.Serializer):
    """Read serializer for the Product resource.

    ``totalStock`` and ``hasStock`` are derived from the variants on
    every read and never stored.
    """

    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    slug = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    purchasePrice = serializers.DecimalField(
        source="purchase_price",
        max_digits=10,
        decimal_places=2,
        read_only=True,
        allow_null=True,
    )
    imageUrl = serializers.CharField(source="image_url", read_only=True, allow_null=True)
    categoryId = serializers.UUIDField(source="category_id", read_only=True)
    totalStock = serializers.IntegerField(source="total_stock", read_only=True)
    hasStock = serializers.SerializerMethodField()
    variants = ProductVariantSerializer(many=True, read_only=True)
    images = ProductImageSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    def get_hasStock(self, product) -> bool:
        return product.has_stock()
