"""Django ORM implementation of the Category repository.

Satisfies ``ICategoryRepository`` using Django's QuerySet API and maps
``CategoryModel`` rows to ``Category`` entities.  Missing rows yield
``None``; store constraint violations are translated into the category
exception taxonomy.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from modules.categories.entities import Category
from modules.categories.exceptions import CategoryAlreadyExists, CategoryInUse
from modules.categories.models import CategoryModel
from modules.categories.repositories.interfaces import ICategoryRepository

logger = structlog.get_logger(__name__)


def to_entity(row: CategoryModel) -> Category:
    return Category(
        id=row.id,
        name=row.name,
        slug=row.slug,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class CategoryDjangoRepository(ICategoryRepository):
    """Concrete Category repository backed by Django ORM."""

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Category]:
        queryset = CategoryModel.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return [to_entity(row) for row in queryset]

    def find_by_id(self, id: str) -> Optional[Category]:
        """Retrieve a category by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            row = CategoryModel.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        return to_entity(row) if row else None

    def find_by_name(self, name: str) -> Optional[Category]:
        row = CategoryModel.objects.filter(name=name.strip()).first()
        return to_entity(row) if row else None

    def has_products(self, id: str) -> bool:
        try:
            return CategoryModel.objects.filter(id=id, products__isnull=False).exists()
        except (ValueError, ValidationError):
            return False

    def create(self, entity: Category) -> Category:
        try:
            with transaction.atomic():
                row = CategoryModel.objects.create(
                    id=entity.id,
                    name=entity.name,
                    slug=entity.slug,
                )
        except IntegrityError as exc:
            logger.warning("category.integrity_error", name=entity.name, error=str(exc))
            raise CategoryAlreadyExists(
                f"Category '{entity.name}' already exists."
            ) from exc
        logger.info("category.saved", category_id=str(row.id), is_new=True)
        return to_entity(row)

    def update(self, entity: Category) -> Category:
        row = CategoryModel.objects.get(id=entity.id)
        row.name = entity.name
        row.slug = entity.slug
        try:
            with transaction.atomic():
                row.save(update_fields=["name", "slug"])
        except IntegrityError as exc:
            logger.warning("category.integrity_error", name=entity.name, error=str(exc))
            raise CategoryAlreadyExists(
                f"Category '{entity.name}' already exists."
            ) from exc
        logger.info("category.saved", category_id=str(row.id), is_new=False)
        return to_entity(row)

    def delete(self, id: str) -> bool:
        """Delete a category by ID.

        Returns ``False`` if no category exists with the given ID.

        Raises:
            CategoryInUse: if products still reference the category.
        """
        try:
            row = CategoryModel.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return False
        if not row:
            return False
        try:
            with transaction.atomic():
                row.delete()
        except ProtectedError as exc:
            logger.warning("category.delete_restricted", category_id=str(id))
            raise CategoryInUse(
                f"Category {id} still has products and cannot be deleted."
            ) from exc
        logger.info("category.deleted", category_id=str(id))
        return True
