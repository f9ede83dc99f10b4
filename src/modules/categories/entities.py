"""Category domain entity.

A pure data holder with a single invariant: the name must be non-empty
after trimming.  The slug is derived from the name and kept in step by
``rename``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from shared.domain.exceptions import InvalidArgument
from shared.domain.slugs import generate_slug


def _clean_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise InvalidArgument("Category name is required.")
    return name.strip()


@dataclass
class Category:
    id: UUID
    name: str
    slug: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.name = _clean_name(self.name)

    def rename(self, name: str) -> None:
        """Replace the name (full replace) and re-derive the slug."""
        self.name = _clean_name(name)
        self.slug = generate_slug(self.name) or None
