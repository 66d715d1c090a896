"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django.http import HttpResponse
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import HasProfile, IsManager, IsSuperAdmin
from modules.accounts.services import WorkspaceService
from modules.catalog.repositories.django_repository import CatalogProductDjangoRepository
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import CreateOrderDTO
from modules.orders.exceptions import (
    ActionNotAllowed,
    InvalidOrderStatus,
    OrderNotFound,
    ProductNotFound,
    ReturnDateRequired,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    NotesSerializer,
    OrderListSerializer,
    OrderSerializer,
    OverrideStatusSerializer,
    ReturnOrderSerializer,
    StageActionSerializer,
)
from modules.orders.services import OrderService
from modules.reports.exports import EXPORT_FORMATS
from modules.reports.services import ExportService

_DOMAIN_ERRORS = (
    OrderNotFound,
    ProductNotFound,
    InvalidOrderStatus,
    ReturnDateRequired,
    ActionNotAllowed,
)


def _error_response(exc: Exception) -> Response:
    if isinstance(exc, OrderNotFound):
        return Response({"detail": "Order not found."}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, ProductNotFound):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, ActionNotAllowed):
        return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class OrderViewSet(GenericViewSet):
    """ViewSet for orders and their production lifecycle.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all writes go through the
    service/repository layer.
    """

    queryset = Order.objects.alive()
    filterset_class = OrderFilter
    ordering_fields = ["order_date", "created_at", "status", "marketplace"]
    ordering = ["-order_date", "-created_at"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    _manager_actions = {
        "create",
        "partial_update",
        "confirm",
        "cancel",
        "return_order",
        "dashboard",
        "export",
    }

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=CatalogProductDjangoRepository(),
            workspace=WorkspaceService(),
        )

    def get_permissions(self):
        if self.action == "destroy":
            return [IsSuperAdmin()]
        if self.action in self._manager_actions:
            return [IsManager()]
        return [HasProfile()]

    def get_throttles(self) -> list[BaseThrottle]:
        """Throttling scopes per action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def perform_content_negotiation(self, request, force=False):
        # ``?format=`` selects the export file type, not a renderer
        return super().perform_content_negotiation(
            request, force=force or self.action == "export"
        )

    def get_queryset(self):
        return OrderDjangoRepository().queryset()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = CreateOrderDTO(**serializer.validated_data)

        try:
            order = self._service.create_order(dto, request.actor)
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve / Destroy
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering is handled by ``OrderFilter``, ordering by
        ``OrderingFilter``. Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(
            page, many=True, context={"today": timezone.localdate()}
        )
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound as exc:
            return _error_response(exc)
        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/ (soft delete)"""
        try:
            self._service.delete_order(pk, request.actor)
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def start(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/start/"""
        payload = StageActionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            order = self._service.start_stage(
                pk, request.actor, department=payload.validated_data["department"]
            )
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def complete(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/complete/"""
        payload = StageActionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            order = self._service.complete_stage(
                pk, request.actor, department=payload.validated_data["department"]
            )
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def confirm(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/confirm/ (READY_TO_SHIP -> COMPLETED)"""
        try:
            order = self._service.confirm_completion(pk, request.actor)
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/"""
        payload = NotesSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            order = self._service.cancel_order(
                pk, request.actor, notes=payload.validated_data["notes"]
            )
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"], url_path="return")
    def return_order(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/return/"""
        payload = ReturnOrderSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            order = self._service.return_order(
                pk,
                payload.validated_data["return_date"],
                request.actor,
                notes=payload.validated_data["notes"],
            )
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)
        return Response(OrderSerializer(order).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/

        Manual status correction. Closing an order goes through the
        dedicated ``confirm`` / ``cancel`` / ``return`` actions.
        """
        payload = OverrideStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            order = self._service.override_status(
                pk,
                payload.validated_data["status"],
                request.actor,
                notes=payload.validated_data["notes"],
            )
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def queue(self, request: Request) -> Response:
        """GET /api/v1/orders/queue/?department="""
        payload = StageActionSerializer(data=request.query_params)
        payload.is_valid(raise_exception=True)
        try:
            queue = self._service.department_queue(
                request.actor, department=payload.validated_data["department"]
            )
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)

        return Response(
            {
                "department": queue.department,
                "pending_status": queue.pending_status,
                "in_progress_status": queue.in_progress_status,
                "orders": OrderListSerializer(queue.orders, many=True).data,
                "counts": queue.counts,
            }
        )

    @action(detail=False, methods=["get"])
    def dashboard(self, request: Request) -> Response:
        """GET /api/v1/orders/dashboard/"""
        try:
            board = self._service.dashboard(request.actor)
        except _DOMAIN_ERRORS as exc:
            return _error_response(exc)

        context = {"today": board.today}
        return Response(
            {
                "today": board.today,
                "total": board.total,
                "completed": board.completed,
                "in_production": board.in_production,
                "overdue_count": board.overdue_count,
                "overdue": OrderListSerializer(board.overdue, many=True, context=context).data,
                "stage_groups": [group.model_dump() for group in board.stage_groups],
            }
        )

    @action(detail=False, methods=["get"])
    def export(self, request: Request) -> HttpResponse:
        """GET /api/v1/orders/export/?format=csv|xlsx|pdf

        Accepts the same filters as the list.
        """
        fmt = request.query_params.get("format", "csv").lower()
        if fmt not in EXPORT_FORMATS:
            return Response(
                {"detail": f"Unsupported format {fmt!r}; use one of {', '.join(EXPORT_FORMATS)}."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        orders = list(self.filter_queryset(self.get_queryset()))
        export = ExportService(
            product_repository=CatalogProductDjangoRepository()
        ).export_orders(orders, fmt, period=self._period_label(request))

        response = HttpResponse(export.content, content_type=export.content_type)
        response["Content-Disposition"] = f'attachment; filename="{export.filename}"'
        return response

    @staticmethod
    def _period_label(request: Request) -> str:
        start = request.query_params.get("start_date")
        end = request.query_params.get("end_date")
        if start or end:
            return f"{start or '...'} s/d {end or '...'}"
        return "Semua Data"
