"""URL slug derivation for catalog names."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w-]", re.ASCII)
_REPEATED_HYPHENS = re.compile(r"-+")


def generate_slug(name: str) -> str:
    """Derive a slug from a display name.

    Lowercases, turns whitespace runs into ``-``, strips anything that is
    not an ASCII word character or hyphen, then collapses hyphen runs::

        >>> generate_slug("Test Product")
        'test-product'
        >>> generate_slug("T-Shirt  (Black) - 2024!")
        't-shirt-black-2024'
    """
    slug = _WHITESPACE.sub("-", name.lower())
    slug = _NON_WORD.sub("", slug)
    return _REPEATED_HYPHENS.sub("-", slug)
