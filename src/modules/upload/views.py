"""Upload API views.

Accepts ``multipart/form-data`` and returns the public URLs of the
stored images.  ``UploadError`` is translated into HTTP 400.
"""

from __future__ import annotations

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.upload.exceptions import UploadError
from modules.upload.services import UploadService
from modules.upload.storage import S3ObjectStorage, StorageConfig


class ImageUploadSerializer(serializers.Serializer):
    file = serializers.FileField()


class ImagesUploadSerializer(serializers.Serializer):
    files = serializers.ListField(child=serializers.FileField(), max_length=10)


def build_upload_service() -> UploadService:
    return UploadService(
        storage=S3ObjectStorage(StorageConfig.from_settings(settings)),
        max_file_size=settings.UPLOAD_MAX_FILE_SIZE,
        max_files=settings.UPLOAD_MAX_FILES,
    )


@extend_schema(tags=["upload"])
class UploadViewSet(ViewSet):
    """Image upload endpoints backed by ``UploadService``."""

    parser_classes = [MultiPartParser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_upload_service()

    @extend_schema(request={"multipart/form-data": ImageUploadSerializer})
    @action(detail=False, methods=["post"], url_path="image")
    def image(self, request: Request) -> Response:
        """POST /upload/image (field ``file``)"""
        try:
            image_url = self._service.upload_image(request.FILES.get("file"))
        except UploadError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "success": True,
                "imageUrl": image_url,
                "message": "Image uploaded successfully.",
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request={"multipart/form-data": ImagesUploadSerializer})
    @action(detail=False, methods=["post"], url_path="images")
    def images(self, request: Request) -> Response:
        """POST /upload/images (field ``files``, at most 10)"""
        try:
            image_urls = self._service.upload_images(request.FILES.getlist("files"))
        except UploadError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "success": True,
                "imageUrls": image_urls,
                "count": len(image_urls),
                "message": "Images uploaded successfully.",
            },
            status=status.HTTP_201_CREATED,
        )
