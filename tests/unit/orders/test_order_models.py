"""Unit tests for Order / OrderStatusHistory models."""

from __future__ import annotations

from datetime import date

import pytest
from django.db import IntegrityError

from modules.orders.constants import OrderStatus
from modules.orders.models import OrderStatusHistory

pytestmark = pytest.mark.unit


class TestOrderModel:
    def test_defaults(self, make_order):
        order = make_order()
        assert order.status == OrderStatus.PENDING_SETTING
        assert order.size == "L"
        assert order.expedition == "J&T Express"
        assert order.product_ref == "custom"
        assert order.return_date is None

    def test_uuid7_primary_key(self, make_order):
        assert make_order().id.version == 7

    @pytest.mark.parametrize(
        "back_name,back_number,expected",
        [("", "", False), ("MESSI", "", True), ("", "10", True)],
    )
    def test_is_custom(self, make_order, back_name, back_number, expected):
        assert make_order(back_name=back_name, back_number=back_number).is_custom is expected

    def test_is_terminal(self, make_order):
        assert not make_order(status=OrderStatus.READY_TO_SHIP).is_terminal
        assert make_order(status=OrderStatus.RETURNED).is_terminal

    def test_soft_delete(self, make_order):
        order = make_order()
        order.delete()
        order.refresh_from_db()
        assert order.is_deleted
        assert not type(order).objects.alive().filter(id=order.id).exists()

    def test_ordering_newest_order_date_first(self, make_order):
        old = make_order(order_date=date(2026, 1, 1))
        new = make_order(order_date=date(2026, 2, 1))
        ids = list(type(old).objects.values_list("id", flat=True))
        assert ids == [new.id, old.id]


class TestOrderStatusHistoryModel:
    def test_sequence_is_unique_per_order(self, make_order):
        order = make_order()
        OrderStatusHistory.objects.create(
            order=order, sequence=1, status=order.status, actor="Owner"
        )
        with pytest.raises(IntegrityError):
            OrderStatusHistory.objects.create(
                order=order, sequence=1, status=order.status, actor="Owner"
            )

    def test_timestamp_is_creation_time(self, make_order):
        order = make_order()
        entry = OrderStatusHistory.objects.create(
            order=order, sequence=1, status=order.status, actor="Owner"
        )
        assert entry.timestamp == entry.created_at
