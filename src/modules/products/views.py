"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.products.dtos import (
    CreateImageDTO,
    CreateProductDTO,
    CreateVariantDTO,
    UpdateProductDTO,
)
from modules.products.exceptions import (
    DuplicateSKU,
    ImageNotFound,
    ProductAlreadyExists,
    ProductNotFound,
    VariantNotFound,
)
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    ProductImageSerializer,
    ProductSerializer,
    ProductVariantSerializer,
)
from modules.products.services import ProductService
from shared.domain.exceptions import ConflictError, InvalidArgument, NotFound


def _bad_request(exc: Exception) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def _not_found(exc: Exception) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)


def _conflict(exc: Exception) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)


@extend_schema(tags=["products"], responses=ProductSerializer)
class ProductViewSet(ViewSet):
    """ViewSet for Product CRUD and for the variants/images it owns.

    Uses ``ProductService`` with the Django repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            category_repository=CategoryDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(
        parameters=[
            OpenApiParameter("category", str),
            OpenApiParameter("name", str),
            OpenApiParameter("min_price", float),
            OpenApiParameter("max_price", float),
            OpenApiParameter("size", str),
        ]
    )
    def list(self, request: Request) -> Response:
        """GET /products"""
        try:
            products = self._service.list_products(request.query_params)
        except InvalidArgument as exc:
            return _bad_request(exc)
        return Response(ProductSerializer(products, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /products/{pk}"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[^/.]+)")
    def by_slug(self, request: Request, slug: str | None = None) -> Response:
        """GET /products/slug/{slug}"""
        try:
            product = self._service.get_product_by_slug(slug)
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /products"""
        try:
            dto = CreateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            product = self._service.create_product(dto)
        except InvalidArgument as exc:
            return _bad_request(exc)
        except (ProductAlreadyExists, DuplicateSKU) as exc:
            return _conflict(exc)

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /products/{pk}

        Only the fields present in the body are changed.
        """
        try:
            dto = UpdateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound as exc:
            return _not_found(exc)
        except InvalidArgument as exc:
            return _bad_request(exc)
        except ProductAlreadyExists as exc:
            return _conflict(exc)

        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /products/{pk}"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /products/{pk}"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    @extend_schema(responses={201: ProductVariantSerializer})
    @action(detail=True, methods=["post"], url_path="variants")
    def add_variant(self, request: Request, pk: str | None = None) -> Response:
        """POST /products/{pk}/variants"""
        try:
            dto = CreateVariantDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            variant = self._service.add_variant(pk, dto)
        except ProductNotFound as exc:
            return _not_found(exc)
        except InvalidArgument as exc:
            return _bad_request(exc)
        except ConflictError as exc:
            return _conflict(exc)

        return Response(
            ProductVariantSerializer(variant).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(responses={204: None})
    @action(detail=True, methods=["delete"], url_path=r"variants/(?P<variant_id>[^/.]+)")
    def remove_variant(
        self, request: Request, pk: str | None = None, variant_id: str | None = None
    ) -> Response:
        """DELETE /products/{pk}/variants/{variant_id}"""
        try:
            self._service.remove_variant(pk, variant_id)
        except (ProductNotFound, VariantNotFound) as exc:
            return _not_found(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    @extend_schema(responses={201: ProductImageSerializer})
    @action(detail=True, methods=["post"], url_path="images")
    def add_image(self, request: Request, pk: str | None = None) -> Response:
        """POST /products/{pk}/images"""
        try:
            dto = CreateImageDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            image = self._service.add_image(pk, dto)
        except NotFound as exc:
            return _not_found(exc)

        return Response(
            ProductImageSerializer(image).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(responses={204: None})
    @action(detail=True, methods=["delete"], url_path=r"images/(?P<image_id>[^/.]+)")
    def remove_image(
        self, request: Request, pk: str | None = None, image_id: str | None = None
    ) -> Response:
        """DELETE /products/{pk}/images/{image_id}"""
        try:
            self._service.remove_image(pk, image_id)
        except (ProductNotFound, ImageNotFound) as exc:
            return _not_found(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
