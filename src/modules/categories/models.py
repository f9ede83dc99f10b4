"""Category table.

Rules implemented at the store:
- ``name`` is unique across categories.
- ``slug`` is unique when present.
- Products reference categories with ``on_delete=PROTECT`` (see
  ``modules.products.models``), so a referenced category cannot be deleted.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class CategoryModel(BaseModel):
    """Persistence row for the Category entity."""

    name = models.CharField(max_length=120, unique=True)
    slug = models.SlugField(max_length=140, unique=True, null=True, blank=True)

    class Meta:
        db_table = "categories"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
