"""Category repository interface.

Extends ``IRepository[Category]`` with the look-ups required by the
unique-name rule and the restricted-delete rule.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.categories.entities import Category


class ICategoryRepository(IRepository["Category"]):
    """Repository contract for the Category aggregate."""

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Category]:
        """Retrieve a category by its unique name."""

    @abstractmethod
    def has_products(self, id: str) -> bool:
        """Return ``True`` while any product references the category."""
