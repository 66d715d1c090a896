"""Report API views (Super Admin only)."""

from __future__ import annotations

from django.http import HttpResponse
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.permissions import IsSuperAdmin
from modules.orders.exceptions import ActionNotAllowed
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.reports.serializers import ReportPeriodSerializer
from modules.reports.services import ReportService


class _ReportView(APIView):
    permission_classes = [IsSuperAdmin]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ReportService(order_repository=OrderDjangoRepository())

    def _period(self, request: Request) -> dict:
        serializer = ReportPeriodSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data


class ReportSummaryView(_ReportView):
    """GET /api/v1/reports/summary/?start_date=&end_date="""

    def get(self, request: Request) -> Response:
        period = self._period(request)
        try:
            report = self._service.summary(request.actor, **period)
        except ActionNotAllowed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(report.model_dump(mode="json"))


class ReportSummaryPdfView(_ReportView):
    """GET /api/v1/reports/summary/pdf/"""

    def get(self, request: Request) -> HttpResponse:
        period = self._period(request)
        try:
            export = self._service.summary_pdf(request.actor, **period)
        except ActionNotAllowed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        response = HttpResponse(export.content, content_type=export.content_type)
        response["Content-Disposition"] = f'attachment; filename="{export.filename}"'
        return response
