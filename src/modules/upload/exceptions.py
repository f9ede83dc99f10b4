"""Upload domain exceptions.

Every upload failure maps to HTTP 400: bad input (wrong content type,
oversized file, empty or oversized batch) and storage provider errors
alike.
"""

from __future__ import annotations

from shared.domain.exceptions import DomainError


class UploadError(DomainError):
    """An image could not be accepted or stored."""
