"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderDeleted,
    OrderReturned,
    OrderStatusChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            status=event.status,
            actor=event.actor,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
            actor=event.actor,
        )


class OrderClosedHandler:
    """Logs the three ways an order leaves the pipeline."""

    def handle(self, event: OrderCompleted | OrderCancelled | OrderReturned) -> None:
        logger.info(
            "order.event.closed",
            order_id=str(event.aggregate_id),
            outcome=event.event_name,
            actor=event.actor,
        )


class OrderDeletedHandler(IEventHandler[OrderDeleted]):
    def handle(self, event: OrderDeleted) -> None:
        logger.info(
            "order.event.deleted",
            order_id=str(event.aggregate_id),
            actor=event.actor,
        )


order_created_handler = OrderCreatedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
order_closed_handler = OrderClosedHandler()
order_deleted_handler = OrderDeletedHandler()
