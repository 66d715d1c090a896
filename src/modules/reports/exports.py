"""File renderers for order lists and report recaps.

Pure functions of already loaded data: they take orders (any object with
the ``Order`` attributes) and return bytes. Nothing here touches the
database or the network.
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Dict, Iterable, Optional, Sequence
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from modules.orders.constants import OrderStatus, OrderType
from modules.reports.dtos import ReportDTO

CSV_CONTENT_TYPE = "text/csv; charset=utf-8"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_CONTENT_TYPE = "application/pdf"

EXPORT_FORMATS: tuple[str, ...] = ("csv", "xlsx", "pdf")

ORDER_COLUMNS: tuple[str, ...] = (
    "ID Pesanan",
    "Marketplace",
    "Kurir",
    "Resi",
    "Nama Produk",
    "Nama Player",
    "No Player",
    "Ukuran",
    "Qty",
    "Tgl Order",
    "Tipe",
    "Status Akhir",
    "Tgl Return",
)

PDF_COLUMNS: tuple[str, ...] = (
    "Foto",
    "ID Order",
    "Marketplace",
    "Kurir",
    "Produk",
    "Custom",
    "Size",
    "Qty",
    "Tanggal",
    "Status",
)

DEFAULT_BUSINESS_NAME = "ERFOLGS STORE"
_DARK = colors.HexColor("#0F172A")
_BLUE = colors.HexColor("#2563EB")
_THUMB = 18 * mm


def status_label(status: str) -> str:
    try:
        return OrderStatus(status).label
    except ValueError:
        return status


def type_label(order_type: str) -> str:
    return "Stok" if order_type == OrderType.STOCK else "Produksi"


def _text(value) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def order_row(order) -> list:
    """One spreadsheet row; blank optional fields render as ``-``."""
    return [
        order.order_id,
        order.marketplace,
        _text(order.expedition),
        _text(order.tracking_number),
        order.product_name,
        _text(order.back_name),
        _text(order.back_number),
        order.size,
        order.quantity,
        _text(order.order_date),
        type_label(order.order_type),
        status_label(order.status),
        _text(order.return_date),
    ]


def custom_text(order) -> str:
    lines = []
    if order.back_name:
        lines.append(f"Nama : {order.back_name}")
    if order.back_number:
        lines.append(f"No. {order.back_number}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# CSV / XLSX
# ---------------------------------------------------------------------------


def render_orders_csv(orders: Iterable) -> bytes:
    """UTF-8 CSV with a byte-order mark so spreadsheet apps detect the encoding."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(ORDER_COLUMNS)
    for order in orders:
        writer.writerow(order_row(order))
    return ("\ufeff" + buffer.getvalue()).encode("utf-8")


def render_orders_xlsx(orders: Iterable) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Orders"

    header_fill = PatternFill("solid", fgColor="2563EB")
    header_font = Font(bold=True, color="FFFFFF")
    center = Alignment(horizontal="center", vertical="center")
    thin_side = Side(style="thin", color="E5E7EB")
    border = Border(left=thin_side, right=thin_side, top=thin_side, bottom=thin_side)

    for col, title in enumerate(ORDER_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col, value=title)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = center
        cell.border = border
        ws.column_dimensions[get_column_letter(col)].width = 18

    for row_idx, order in enumerate(orders, start=2):
        for col, value in enumerate(order_row(order), start=1):
            cell = ws.cell(row=row_idx, column=col, value=value)
            cell.border = border

    ws.freeze_panes = "A2"
    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------


def _thumbnail(data: Optional[bytes]):
    if not data:
        return ""
    try:
        ImageReader(io.BytesIO(data)).getSize()
    except (OSError, ValueError):
        return ""
    return Image(io.BytesIO(data), width=_THUMB, height=_THUMB)


def render_orders_pdf(
    orders: Sequence,
    images: Optional[Dict[str, bytes]] = None,
    period: str = "-",
    printed_at: Optional[datetime] = None,
    business_name: str = DEFAULT_BUSINESS_NAME,
) -> bytes:
    """Landscape A4 production recap with product thumbnails.

    ``images`` maps ``product_ref`` to raw image bytes; orders without an
    entry get an empty photo cell.
    """
    images = images or {}
    printed_at = printed_at or datetime.now()
    styles = getSampleStyleSheet()
    total_qty = sum(order.quantity or 0 for order in orders)

    bio = io.BytesIO()
    doc = SimpleDocTemplate(
        bio,
        pagesize=landscape(A4),
        leftMargin=10 * mm,
        rightMargin=10 * mm,
        topMargin=10 * mm,
        bottomMargin=10 * mm,
        title=f"Rekapan {business_name}",
    )
    story = [
        Paragraph(escape(business_name), styles["Title"]),
        Paragraph("PRODUCTION REPORT CLOUD SYSTEM", styles["Normal"]),
        Paragraph(
            f"Dicetak: {printed_at:%d/%m/%Y %H:%M} | "
            f"Total: {len(orders)} Pesanan | Qty: {total_qty} | Periode: {escape(period)}",
            styles["Normal"],
        ),
        Spacer(1, 6 * mm),
    ]

    data = [list(PDF_COLUMNS)]
    for order in orders:
        data.append(
            [
                _thumbnail(images.get(order.product_ref)),
                order.order_id,
                order.marketplace,
                order.expedition or "",
                order.product_name,
                custom_text(order),
                order.size,
                order.quantity,
                _text(order.order_date),
                status_label(order.status),
            ]
        )

    table = Table(
        data,
        repeatRows=1,
        colWidths=[22 * mm, 30 * mm, 32 * mm, 24 * mm, 45 * mm, 38 * mm, 14 * mm, 12 * mm, 24 * mm, 36 * mm],
    )
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _BLUE),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 7),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
            ]
        )
    )
    story.append(table)
    doc.build(story)
    return bio.getvalue()


def render_report_pdf(report: ReportDTO, business_name: str = DEFAULT_BUSINESS_NAME) -> bytes:
    """Portrait A4 recap: indicators plus the marketplace table."""
    styles = getSampleStyleSheet()
    bio = io.BytesIO()
    doc = SimpleDocTemplate(bio, pagesize=A4, title=f"Laporan {business_name}")

    indicators = Table(
        [
            ["Indikator", "Hasil"],
            ["Total Order", f"{report.total}"],
            ["Volume Produksi (PO)", f"{report.production_qty} Pcs"],
            ["Ambil Stok", f"{report.stock_qty} Pcs"],
            ["Selesai", f"{report.completed}"],
        ],
        colWidths=[90 * mm, 60 * mm],
    )
    indicators.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _DARK),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.white]),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ]
        )
    )

    rows = [["Marketplace", "Order", "Qty", "Done", "Antri"]]
    for mp in report.marketplaces:
        rows.append([mp.marketplace, mp.count, mp.qty, mp.done, mp.pending])
    grand = report.grand_total
    rows.append(["TOTAL", grand.count, grand.qty, grand.done, grand.pending])

    summary = Table(rows, colWidths=[70 * mm, 20 * mm, 20 * mm, 20 * mm, 20 * mm])
    summary.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _DARK),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("ALIGN", (1, 0), (-1, -1), "CENTER"),
            ]
        )
    )

    doc.build(
        [
            Paragraph(escape(business_name), styles["Title"]),
            Paragraph("LAPORAN AUDIT &amp; REKAPITULASI PRODUKSI", styles["Heading3"]),
            Paragraph(
                f"Periode: {report.start_date.isoformat()} s/d {report.end_date.isoformat()}",
                styles["Normal"],
            ),
            Spacer(1, 8 * mm),
            indicators,
            Spacer(1, 10 * mm),
            summary,
        ]
    )
    return bio.getvalue()
