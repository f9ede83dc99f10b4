"""Upload URL configuration."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.upload.views import UploadViewSet

router = SimpleRouter(trailing_slash=False)
router.register("upload", UploadViewSet, basename="upload")

urlpatterns = router.urls
