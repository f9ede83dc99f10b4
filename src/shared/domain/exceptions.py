"""Error taxonomy shared by every catalog module.

Each module defines its own exceptions in ``exceptions.py`` by
subclassing one of these bases.  The API layer only needs to know the
base class to pick an HTTP status code:

- ``InvalidArgument`` -> 400
- ``NotFound`` -> 404
- ``ConflictError`` -> 409

Modules may also derive directly from ``DomainError`` (uploads do); those
errors render as 400.
"""

from __future__ import annotations


class DomainError(Exception):
    """Root of all catalog domain errors."""


class InvalidArgument(DomainError):
    """A value violates an entity invariant or references unknown data."""


class NotFound(DomainError):
    """A lookup by id or slug found nothing."""


class ConflictError(DomainError):
    """A uniqueness or referential-integrity constraint was violated."""
