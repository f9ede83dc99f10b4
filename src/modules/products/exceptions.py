"""Product domain exceptions.

Raised by the aggregate, the Service Layer and the repository when
business rules are violated.  The API layer (Views) catches these and
translates them into appropriate HTTP responses.
"""

from __future__ import annotations

from shared.domain.exceptions import ConflictError, InvalidArgument, NotFound


class InvalidSize(InvalidArgument):
    """A size string is outside the catalog's closed set of sizes."""


class ProductNotFound(NotFound):
    """The requested product does not exist."""


class VariantNotFound(NotFound):
    """The requested variant is not part of the product."""


class ImageNotFound(NotFound):
    """The requested image is not part of the product's gallery."""


class ProductAlreadyExists(ConflictError):
    """A product with the same name or slug already exists."""


class DuplicateSKU(ConflictError):
    """A variant with the same SKU already exists (on the product or globally)."""
