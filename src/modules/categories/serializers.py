"""Category DRF serializers (output only).

Input is validated by the pydantic DTOs in ``dtos.py``; these
serializers render ``Category`` entities with camelCase keys.
"""

from __future__ import annotations

from rest_framework import serializers


class CategorySerializer(serializers.Serializer):
    """Read serializer for the Category resource."""

    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    slug = serializers.CharField(read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
