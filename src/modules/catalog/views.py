"""Catalog API views.

Exposes the ``CatalogService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into HTTP status codes.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import HasProfile, IsSuperAdmin
from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
from modules.catalog.exceptions import CatalogWriteNotAllowed, ProductNotFound
from modules.catalog.filters import CatalogProductFilter
from modules.catalog.models import CatalogProduct
from modules.catalog.repositories.django_repository import CatalogProductDjangoRepository
from modules.catalog.serializers import (
    CatalogProductSerializer,
    CatalogProductWriteSerializer,
)
from modules.catalog.services import CatalogService


def _not_found() -> Response:
    return Response({"detail": "Product not found."}, status=status.HTTP_404_NOT_FOUND)


class CatalogProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for catalog CRUD.

    Reads are open to every profile; writes to Super Admin only.
    """

    filterset_class = CatalogProductFilter
    search_fields = ["name", "category"]
    ordering_fields = ["name", "category", "created_at"]
    ordering = ["name"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = CatalogProduct.objects.alive()
    serializer_class = CatalogProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CatalogService(repository=CatalogProductDjangoRepository())

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [HasProfile()]
        return [IsSuperAdmin()]

    def get_queryset(self):
        return CatalogProduct.objects.alive()

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/catalog/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(CatalogProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/catalog/"""
        serializer = CatalogProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateProductDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": exc.errors()[0]["msg"]},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.create_product(dto, request.actor)
        except CatalogWriteNotAllowed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)

        return Response(
            CatalogProductSerializer(product).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None, partial: bool = False) -> Response:
        """PUT/PATCH /api/v1/catalog/{pk}/"""
        serializer = CatalogProductWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        if partial:
            data = {k: v for k, v in data.items() if k in request.data}
        try:
            dto = UpdateProductDTO(**data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": exc.errors()[0]["msg"]},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.update_product(pk, dto, request.actor)
        except ProductNotFound:
            return _not_found()
        except CatalogWriteNotAllowed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)

        return Response(CatalogProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/catalog/{pk}/"""
        return self.update(request, pk, partial=True)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/catalog/{pk}/"""
        try:
            self._service.delete_product(pk, request.actor)
        except ProductNotFound:
            return _not_found()
        except CatalogWriteNotAllowed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)
