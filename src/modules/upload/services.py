"""Image upload service (Use Cases).

Validates incoming files before any transfer and hands accepted bytes
to the injected object storage.

Rules enforced here:
- Only ``image/*`` content types are accepted.
- A single file may not exceed ``max_file_size`` (5 MB by default).
- A batch holds between one and ``max_files`` (10 by default) files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Sequence

import structlog

from modules.upload.exceptions import UploadError

if TYPE_CHECKING:
    from modules.upload.storage import S3ObjectStorage

logger = structlog.get_logger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024
MAX_FILES = 10


class UploadService:
    """Application service for image uploads.

    ``file`` arguments are Django ``UploadedFile`` objects, or anything
    exposing ``name``, ``size``, ``content_type`` and ``read()``.
    """

    def __init__(
        self,
        storage: S3ObjectStorage,
        max_file_size: int = MAX_FILE_SIZE,
        max_files: int = MAX_FILES,
        folder: Optional[str] = None,
    ) -> None:
        self._storage = storage
        self.max_file_size = max_file_size
        self.max_files = max_files
        self.folder = folder

    def _validate(self, file: Any) -> None:
        if file is None:
            raise UploadError("No file was provided.")
        content_type = getattr(file, "content_type", None) or ""
        if not content_type.startswith("image/"):
            raise UploadError("The file must be an image.")
        if file.size > self.max_file_size:
            limit_mb = self.max_file_size // (1024 * 1024)
            raise UploadError(f"The image cannot exceed {limit_mb}MB.")

    def upload_image(self, file: Any) -> str:
        """Store one image and return its public URL.

        Raises:
            UploadError: if the file is not an image, is too large, or the
                storage provider fails.
        """
        self._validate(file)
        stored = self._storage.upload(
            file.read(),
            folder=self.folder,
            filename=file.name,
            content_type=file.content_type,
        )
        logger.info("upload.image_stored", filename=file.name, size=file.size, key=stored.key)
        return stored.url

    def upload_images(self, files: Sequence[Any]) -> List[str]:
        """Store a batch of images; every file is validated before any is sent.

        Raises:
            UploadError: for an empty or oversized batch, or any invalid file.
        """
        if not files:
            raise UploadError("At least one image must be provided.")
        if len(files) > self.max_files:
            raise UploadError(f"Cannot upload more than {self.max_files} images at once.")
        for file in files:
            self._validate(file)

        urls = [self.upload_image(file) for file in files]
        logger.info("upload.batch_stored", count=len(urls))
        return urls

    def delete_image(self, public_id: str) -> None:
        """Remove an image by object key or by the public URL it was served at."""
        if not public_id:
            raise UploadError("An image identifier is required.")
        prefix = self._storage.public_url("")
        key = public_id[len(prefix):] if public_id.startswith(prefix) else public_id
        self._storage.delete(key)
        logger.info("upload.image_deleted", key=key)
