"""Category DTOs for the Service Layer.

Pydantic v2 contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class CategoryNameDTO(BaseModel):
    """Input for category creation and full-name replacement."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Category name is required.")
        if len(v) > 120:
            raise ValueError("Category name must be at most 120 characters.")
        return v
