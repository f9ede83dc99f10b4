"""Category domain exceptions.

Raised by the Service Layer and the repository when business rules are
violated.  The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from shared.domain.exceptions import ConflictError, NotFound


class CategoryAlreadyExists(ConflictError):
    """A category with the same name (or slug) already exists."""


class CategoryNotFound(NotFound):
    """The requested category does not exist."""


class CategoryInUse(ConflictError):
    """The category is still referenced by at least one product.

    Category deletion is restricted, never cascaded.
    """
