"""Category service layer (Use Cases).

Orchestrates the Category aggregate, delegating persistence to the
injected ``ICategoryRepository``.

Rules enforced here:
- Category name must be unique.
- A category referenced by products cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
import uuid6
from django.db import transaction

from modules.categories.entities import Category
from modules.categories.exceptions import (
    CategoryAlreadyExists,
    CategoryInUse,
    CategoryNotFound,
)
from shared.domain.slugs import generate_slug

if TYPE_CHECKING:
    from modules.categories.dtos import CategoryNameDTO
    from modules.categories.repositories.interfaces import ICategoryRepository

logger = structlog.get_logger(__name__)


class CategoryService:
    """Application service for Category use-cases.

    Receives an ``ICategoryRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICategoryRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_category(self, dto: CategoryNameDTO) -> Category:
        """Create a category after enforcing the unique-name rule.

        Raises:
            CategoryAlreadyExists: if the name is already taken.
        """
        log = logger.bind(name=dto.name)

        if self._repo.find_by_name(dto.name):
            log.warning("category.duplicate_name")
            raise CategoryAlreadyExists(f"Category '{dto.name}' already exists.")

        category = Category(
            id=uuid6.uuid7(),
            name=dto.name,
            slug=generate_slug(dto.name) or None,
        )
        category = self._repo.create(category)
        log.info("category.created", category_id=str(category.id))
        return category

    @transaction.atomic
    def rename_category(self, id: str, dto: CategoryNameDTO) -> Category:
        """Replace the category name.

        Raises:
            CategoryNotFound: if the category does not exist.
            CategoryAlreadyExists: if another category uses the name.
        """
        category = self.get_category(id)
        log = logger.bind(category_id=str(id))

        existing = self._repo.find_by_name(dto.name)
        if existing and existing.id != category.id:
            log.warning("category.duplicate_name", name=dto.name)
            raise CategoryAlreadyExists(f"Category '{dto.name}' already exists.")

        category.rename(dto.name)
        category = self._repo.update(category)
        log.info("category.renamed", name=category.name)
        return category

    @transaction.atomic
    def delete_category(self, id: str) -> None:
        """Delete a category that no product references.

        Raises:
            CategoryNotFound: if the category does not exist.
            CategoryInUse: if products still reference it.
        """
        self.get_category(id)
        if self._repo.has_products(id):
            logger.warning("category.delete_restricted", category_id=str(id))
            raise CategoryInUse(
                f"Category {id} still has products and cannot be deleted."
            )
        self._repo.delete(id)
        logger.info("category.deleted", category_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_categories(self) -> List[Category]:
        return self._repo.find_all()

    def get_category(self, id: str) -> Category:
        """Retrieve a single category by ID.

        Raises:
            CategoryNotFound: if the category does not exist.
        """
        category = self._repo.find_by_id(id)
        if not category:
            raise CategoryNotFound(f"Category {id} not found.")
        return category
