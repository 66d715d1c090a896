"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Concurrency control on status updates uses ``select_for_update()``;
the last write no longer silently wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Max, Q, QuerySet
from django.utils import timezone

from modules.core.models import OutboxEvent
from modules.orders.constants import TERMINAL_STATES
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

if TYPE_CHECKING:
    from modules.accounts.dtos import ActorDTO
    from modules.orders.dtos import OrderFilterDTO

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def _live(self) -> QuerySet:
        return Order.objects.alive().prefetch_related("history")

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(**data)
        order.full_clean(exclude=["id"])
        order.save()
        logger.info("order.inserted", order_id=str(order.id))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve a live order with its history prefetched.

        Returns ``None`` for non-existent, soft-deleted or invalid IDs.
        """
        try:
            return self._live().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return Order.objects.alive().select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = self._live()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def queryset(self) -> QuerySet:
        """Base queryset for the API layer (filter backends, pagination)."""
        return self._live()

    def search(self, filters: Optional[OrderFilterDTO] = None) -> List[Order]:
        return list(apply_order_filters(self._live(), filters))

    def with_statuses(self, statuses: Iterable[str]) -> List[Order]:
        return list(
            self._live().filter(status__in=list(statuses)).order_by("order_date", "created_at")
        )

    def count_by_status(self) -> Dict[str, int]:
        rows = Order.objects.alive().values("status").annotate(total=Count("id"))
        return {row["status"]: row["total"] for row in rows}

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and flush its domain events to the outbox."""
        entity.save()

        events = entity.domain_events
        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=event.to_payload(),
                topic="orders",
            )
        entity.clear_domain_events()

        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete an order by ID."""
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.soft_deleted", order_id=str(id))
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_history(
        self,
        order: Order,
        status: str,
        actor: ActorDTO,
        notes: str = "",
    ) -> OrderStatusHistory:
        """Append the next history entry.

        Callers hold the order row lock, so ``MAX(sequence) + 1`` is stable.
        """
        last = OrderStatusHistory.objects.filter(order=order).aggregate(
            last=Max("sequence")
        )["last"]
        history = OrderStatusHistory.objects.create(
            order=order,
            sequence=(last or 0) + 1,
            status=status,
            actor=actor.display_name,
            user_id=actor.user_id,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order.id),
            sequence=history.sequence,
            status=status,
            actor=actor.display_name,
        )
        return history


def apply_order_filters(queryset: QuerySet, filters: Optional[OrderFilterDTO]) -> QuerySet:
    """Apply the order-list filter set to an ``Order`` queryset."""
    if filters is None:
        return queryset
    if filters.status:
        queryset = queryset.filter(status=filters.status)
    if filters.marketplace:
        queryset = queryset.filter(marketplace=filters.marketplace)
    if filters.order_type:
        queryset = queryset.filter(order_type=filters.order_type)
    if filters.start_date:
        queryset = queryset.filter(order_date__gte=filters.start_date)
    if filters.end_date:
        queryset = queryset.filter(order_date__lte=filters.end_date)
    if filters.only_custom:
        queryset = queryset.exclude(back_name="", back_number="")
    if filters.urgent:
        queryset = queryset.filter(order_date__lt=timezone.localdate()).exclude(
            status__in=TERMINAL_STATES
        )
    if filters.search:
        term = filters.search.strip()
        queryset = queryset.filter(
            Q(order_id__icontains=term)
            | Q(tracking_number__icontains=term)
            | Q(product_name__icontains=term)
            | Q(back_name__icontains=term)
        )
    return queryset

