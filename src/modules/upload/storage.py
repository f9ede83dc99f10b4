"""S3-compatible object storage for product images.

Usage::

    storage = S3ObjectStorage(StorageConfig.from_settings(settings))
    stored = storage.upload(data, folder="catalog/products",
                            filename="shirt.png", content_type="image/png")
    stored.url  # public HTTPS URL

Works against AWS S3 and against S3-compatible services (MinIO, R2)
when ``endpoint_url`` is set.  The boto3 client is created on first use
and belongs to the storage instance.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Optional

import boto3
import structlog
import uuid6
from botocore.exceptions import BotoCoreError, ClientError

from modules.upload.exceptions import UploadError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StorageConfig:
    """Connection settings for the image bucket."""

    bucket: str
    region: str = "us-east-1"
    folder: str = "catalog/products"
    endpoint_url: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    public_base_url: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Any) -> "StorageConfig":
        """Build from the ``OBJECT_STORAGE`` dict in Django settings."""
        options = settings.OBJECT_STORAGE
        return cls(
            bucket=options["BUCKET"],
            region=options.get("REGION") or "us-east-1",
            folder=options.get("FOLDER") or "catalog/products",
            endpoint_url=options.get("ENDPOINT_URL") or None,
            access_key_id=options.get("ACCESS_KEY_ID") or None,
            secret_access_key=options.get("SECRET_ACCESS_KEY") or None,
            public_base_url=options.get("PUBLIC_BASE_URL") or None,
        )


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str


class S3ObjectStorage:
    """Store and delete image objects in an S3 bucket."""

    def __init__(self, config: StorageConfig, client: Any = None) -> None:
        self.config = config
        self._client = client

    def _get_client(self):
        if self._client is None:
            kwargs = {"region_name": self.config.region}
            if self.config.endpoint_url:
                kwargs["endpoint_url"] = self.config.endpoint_url
            if self.config.access_key_id:
                kwargs["aws_access_key_id"] = self.config.access_key_id
            if self.config.secret_access_key:
                kwargs["aws_secret_access_key"] = self.config.secret_access_key
            self._client = boto3.client("s3", **kwargs)
        return self._client

    def public_url(self, key: str) -> str:
        if self.config.public_base_url:
            return f"{self.config.public_base_url.rstrip('/')}/{key}"
        if self.config.endpoint_url:
            return f"{self.config.endpoint_url.rstrip('/')}/{self.config.bucket}/{key}"
        return f"https://{self.config.bucket}.s3.{self.config.region}.amazonaws.com/{key}"

    @staticmethod
    def object_key(folder: str, filename: str, content_type: str) -> str:
        """``<folder>/<uuid7><ext>``; the extension comes from the filename or the type."""
        suffix = PurePosixPath(filename or "").suffix.lower()
        if not suffix:
            suffix = mimetypes.guess_extension(content_type) or ""
        return f"{folder.strip('/')}/{uuid6.uuid7()}{suffix}"

    def upload(
        self,
        data: bytes,
        *,
        folder: Optional[str] = None,
        filename: str = "",
        content_type: str = "application/octet-stream",
    ) -> StoredObject:
        """Put ``data`` into the bucket and return its key and public URL.

        Raises:
            UploadError: if the provider rejects the request.
        """
        key = self.object_key(folder or self.config.folder, filename, content_type)
        try:
            self._get_client().put_object(
                Bucket=self.config.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("storage.put_failed", bucket=self.config.bucket, key=key, error=str(exc))
            raise UploadError("Failed to upload image to storage.") from exc

        stored = StoredObject(key=key, url=self.public_url(key))
        logger.info("storage.object_stored", bucket=self.config.bucket, key=key, size=len(data))
        return stored

    def delete(self, key: str) -> None:
        """Raises:
            UploadError: if the provider rejects the request.
        """
        try:
            self._get_client().delete_object(Bucket=self.config.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("storage.delete_failed", bucket=self.config.bucket, key=key, error=str(exc))
            raise UploadError("Failed to delete image from storage.") from exc
        logger.info("storage.object_deleted", bucket=self.config.bucket, key=key)
