"""Report service layer.

``build_report`` is the pure recap computation; ``ReportService`` loads
orders for it, and ``ExportService`` turns an order list into a file.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence

import structlog
from django.conf import settings
from django.utils import timezone

from modules.catalog.images import resolve_image
from modules.orders.constants import MARKETPLACE_LIST, OrderStatus, OrderType
from modules.orders.dtos import OrderFilterDTO
from modules.orders.exceptions import ActionNotAllowed
from modules.reports import exports
from modules.reports.dtos import ExportFileDTO, MarketplaceSummaryDTO, ReportDTO

if TYPE_CHECKING:
    from modules.accounts.dtos import ActorDTO
    from modules.catalog.repositories.interfaces import ICatalogProductRepository
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_NOT_PENDING = {OrderStatus.COMPLETED, OrderStatus.CANCELED, OrderStatus.RETURNED}


def build_report(orders: Iterable, start_date: date, end_date: date) -> ReportDTO:
    """Recap of orders with ``start_date <= order_date <= end_date``.

    The marketplace table only covers ``MARKETPLACE_LIST``; orders from
    any other marketplace count in the totals but get no row.
    """
    selected = [o for o in orders if start_date <= o.order_date <= end_date]

    summary: Dict[str, Dict[str, int]] = {
        mp: {"count": 0, "qty": 0, "done": 0, "pending": 0} for mp in MARKETPLACE_LIST
    }
    for order in selected:
        row = summary.get(order.marketplace)
        if row is None:
            continue
        row["count"] += 1
        row["qty"] += order.quantity or 0
        if order.status == OrderStatus.COMPLETED:
            row["done"] += 1
        elif order.status not in _NOT_PENDING:
            row["pending"] += 1

    marketplaces = sorted(
        (
            MarketplaceSummaryDTO(marketplace=name, **values)
            for name, values in summary.items()
            if values["count"] > 0
        ),
        key=lambda mp: mp.count,
        reverse=True,
    )
    grand_total = MarketplaceSummaryDTO(
        marketplace="TOTAL",
        count=sum(mp.count for mp in marketplaces),
        qty=sum(mp.qty for mp in marketplaces),
        done=sum(mp.done for mp in marketplaces),
        pending=sum(mp.pending for mp in marketplaces),
    )

    production_qty = sum(
        o.quantity or 0 for o in selected if o.order_type == OrderType.PRE_ORDER
    )
    stock_qty = sum(o.quantity or 0 for o in selected if o.order_type == OrderType.STOCK)
    return ReportDTO(
        start_date=start_date,
        end_date=end_date,
        total=len(selected),
        completed=sum(1 for o in selected if o.status == OrderStatus.COMPLETED),
        production_qty=production_qty,
        stock_qty=stock_qty,
        total_qty=sum(o.quantity or 0 for o in selected),
        marketplaces=marketplaces,
        grand_total=grand_total,
    )


class ReportService:
    """Report use-cases (Super Admin only)."""

    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    def summary(
        self,
        actor: ActorDTO,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ReportDTO:
        """Raises ``ActionNotAllowed`` unless the actor is Super Admin."""
        if not actor.is_superadmin:
            raise ActionNotAllowed("Only Super Admin may view reports.")
        today = timezone.localdate()
        start_date = start_date or today
        end_date = end_date or today
        orders = self._order_repo.search(
            OrderFilterDTO(start_date=start_date, end_date=end_date)
        )
        report = build_report(orders, start_date, end_date)
        logger.info(
            "report.built",
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            total=report.total,
        )
        return report

    def summary_pdf(
        self,
        actor: ActorDTO,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ExportFileDTO:
        report = self.summary(actor, start_date, end_date)
        return ExportFileDTO(
            content=exports.render_report_pdf(report, business_name=settings.BUSINESS_NAME),
            content_type=exports.PDF_CONTENT_TYPE,
            filename=f"LAPORAN_ERFOLGS_{report.start_date.isoformat()}.pdf",
        )


class ExportService:
    """Renders an already filtered order list into a downloadable file."""

    def __init__(self, product_repository: ICatalogProductRepository) -> None:
        self._product_repo = product_repository

    def product_images(self, orders: Iterable) -> Dict[str, bytes]:
        refs = {o.product_ref for o in orders}
        products = self._product_repo.in_bulk(refs)
        images: Dict[str, bytes] = {}
        for ref, product in products.items():
            data = resolve_image(product)
            if data:
                images[ref] = data
        return images

    def export_orders(
        self,
        orders: Sequence,
        fmt: str,
        period: str = "-",
        today: Optional[date] = None,
        printed_at: Optional[datetime] = None,
    ) -> ExportFileDTO:
        today = today or timezone.localdate()
        stamp = today.isoformat()
        if fmt == "csv":
            result = ExportFileDTO(
                content=exports.render_orders_csv(orders),
                content_type=exports.CSV_CONTENT_TYPE,
                filename=f"ERFOLGS_EXPORT_{stamp}.csv",
            )
        elif fmt == "xlsx":
            result = ExportFileDTO(
                content=exports.render_orders_xlsx(orders),
                content_type=exports.XLSX_CONTENT_TYPE,
                filename=f"ERFOLGS_EXPORT_{stamp}.xlsx",
            )
        elif fmt == "pdf":
            result = ExportFileDTO(
                content=exports.render_orders_pdf(
                    orders,
                    images=self.product_images(orders),
                    period=period,
                    printed_at=printed_at or timezone.localtime(),
                    business_name=settings.BUSINESS_NAME,
                ),
                content_type=exports.PDF_CONTENT_TYPE,
                filename=f"REKAPAN_ERFOLGS_{stamp}.pdf",
            )
        else:
            raise ValueError(f"Unsupported export format {fmt!r}.")

        logger.info("orders.exported", format=fmt, rows=len(orders), filename=result.filename)
        return result
