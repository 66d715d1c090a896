"""Report URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.reports.views import ReportSummaryPdfView, ReportSummaryView

urlpatterns = [
    path("reports/summary/", ReportSummaryView.as_view(), name="report-summary"),
    path("reports/summary/pdf/", ReportSummaryPdfView.as_view(), name="report-summary-pdf"),
]
