"""Unit tests for the CSV / XLSX / PDF renderers and ExportService."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime

import pytest
from openpyxl import load_workbook

from modules.catalog.repositories.django_repository import CatalogProductDjangoRepository
from modules.orders.constants import OrderStatus, OrderType
from modules.reports import exports
from modules.reports.services import ExportService

pytestmark = pytest.mark.unit


@pytest.fixture()
def orders(make_order, catalog_product):
    return [
        make_order(
            order_id="SHP-1",
            product_ref=str(catalog_product.id),
            product_name="Jersey Home 2024",
            back_name="RONALDO",
            back_number="7",
            size="XL",
            quantity=2,
            order_date=date(2026, 10, 19),
        ),
        make_order(
            order_id="SHP-2",
            marketplace="WhatsApp",
            tracking_number="",
            order_type=OrderType.STOCK,
            status=OrderStatus.RETURNED,
            return_date=date(2026, 10, 25),
            order_date=date(2026, 10, 18),
        ),
    ]


class TestLabels:
    def test_status_label(self):
        assert exports.status_label(OrderStatus.READY_TO_SHIP) == "Siap Dikirim"
        assert exports.status_label("LEGACY") == "LEGACY"

    def test_type_label(self):
        assert exports.type_label(OrderType.STOCK) == "Stok"
        assert exports.type_label(OrderType.PRE_ORDER) == "Produksi"

    def test_custom_text(self, orders):
        assert exports.custom_text(orders[0]) == "Nama : RONALDO\nNo. 7"
        assert exports.custom_text(orders[1]) == ""


class TestCsv:
    def test_starts_with_bom(self, orders):
        content = exports.render_orders_csv(orders)
        assert content.startswith("\ufeff".encode("utf-8"))

    def test_header_and_rows(self, orders):
        text = exports.render_orders_csv(orders).decode("utf-8-sig")
        rows = list(csv.reader(io.StringIO(text)))

        assert tuple(rows[0]) == exports.ORDER_COLUMNS
        assert rows[1][0] == "SHP-1"
        assert rows[1][5] == "RONALDO"
        assert rows[1][8] == "2"
        assert rows[1][10] == "Produksi"

    def test_blank_values_render_as_dash(self, orders):
        text = exports.render_orders_csv(orders).decode("utf-8-sig")
        second = list(csv.reader(io.StringIO(text)))[2]
        assert second[3] == "-"
        assert second[5] == "-"
        assert second[10] == "Stok"
        assert second[11] == "Dikembalikan (Return)"
        assert second[12] == "2026-10-25"

    def test_empty_list_has_header_only(self):
        text = exports.render_orders_csv([]).decode("utf-8-sig")
        assert text.count("\n") == 1


class TestXlsx:
    def test_workbook_content(self, orders):
        wb = load_workbook(io.BytesIO(exports.render_orders_xlsx(orders)))
        ws = wb.active

        assert ws.title == "Orders"
        assert [c.value for c in ws[1]] == list(exports.ORDER_COLUMNS)
        assert ws["A2"].value == "SHP-1"
        assert ws["I2"].value == 2
        assert ws.max_row == 3
        assert ws.freeze_panes == "A2"


class TestPdf:
    def test_orders_pdf(self, orders):
        content = exports.render_orders_pdf(
            orders,
            images={},
            period="2026-10-01 s/d 2026-10-31",
            printed_at=datetime(2026, 10, 19, 9, 0),
        )
        assert content.startswith(b"%PDF")

    def test_orders_pdf_with_thumbnail(self, orders, catalog_product):
        images = ExportService(CatalogProductDjangoRepository()).product_images(orders)
        assert set(images) == {str(catalog_product.id)}
        assert exports.render_orders_pdf(orders, images=images).startswith(b"%PDF")

    def test_escapes_markup_in_business_name(self, orders):
        content = exports.render_orders_pdf(orders, business_name="A & B <Store>")
        assert content.startswith(b"%PDF")


class TestExportService:
    @pytest.mark.parametrize(
        "fmt,filename,content_type",
        [
            ("csv", "ERFOLGS_EXPORT_2026-10-19.csv", exports.CSV_CONTENT_TYPE),
            ("xlsx", "ERFOLGS_EXPORT_2026-10-19.xlsx", exports.XLSX_CONTENT_TYPE),
            ("pdf", "REKAPAN_ERFOLGS_2026-10-19.pdf", exports.PDF_CONTENT_TYPE),
        ],
    )
    def test_file_names(self, orders, fmt, filename, content_type):
        export = ExportService(CatalogProductDjangoRepository()).export_orders(
            orders, fmt, today=date(2026, 10, 19)
        )
        assert export.filename == filename
        assert export.content_type == content_type
        assert export.content

    def test_unknown_format(self, orders):
        with pytest.raises(ValueError):
            ExportService(CatalogProductDjangoRepository()).export_orders(orders, "docx")
