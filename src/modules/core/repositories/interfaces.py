"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
aggregate-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.

Repositories speak in domain entities (plain dataclasses), not ORM
rows: the concrete implementation maps in both directions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Mapping, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Category``, ``Product``).
    """

    @abstractmethod
    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[T]:
        """Return all entities (order unspecified)."""

    @abstractmethod
    def find_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key, or ``None``.

        Must not raise for missing or malformed ids.
        """

    @abstractmethod
    def create(self, entity: T) -> T:
        """Persist a new entity and return it as stored."""

    @abstractmethod
    def update(self, entity: T) -> T:
        """Persist scalar-field changes of an existing entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove an entity by ID; ``False`` when nothing was removed."""
