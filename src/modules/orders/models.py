"""Order and OrderStatusHistory models.

- ``Order`` is the aggregate root; its ``status`` only changes through
  ``OrderService`` (see ``lifecycle.plan_transition``).
- ``OrderStatusHistory`` is append-only: one row per status the order has
  held, numbered by ``sequence`` starting at 1.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel, SoftDeleteModel
from modules.orders.constants import (
    CUSTOM_PRODUCT_REF,
    DEFAULT_EXPEDITION,
    DEFAULT_SIZE,
    TERMINAL_STATES,
    OrderStatus,
    OrderType,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, SoftDeleteModel):
    """A marketplace order tracked through the production pipeline.

    ``order_id`` is the marketplace's own reference and is not unique: one
    marketplace order can hold several garments, each tracked separately.
    ``product_ref`` / ``product_name`` snapshot the catalog entry at intake.
    """

    order_id = models.CharField(max_length=100, db_index=True)
    product_ref = models.CharField(max_length=64, default=CUSTOM_PRODUCT_REF)
    product_name = models.CharField(max_length=255)
    size = models.CharField(max_length=8, default=DEFAULT_SIZE)
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    back_name = models.CharField(max_length=100, blank=True, default="")
    back_number = models.CharField(max_length=20, blank=True, default="")
    marketplace = models.CharField(max_length=100)
    expedition = models.CharField(max_length=100, default=DEFAULT_EXPEDITION)
    tracking_number = models.CharField(max_length=100, blank=True, default="")
    order_date = models.DateField()
    order_type = models.CharField(
        max_length=20,
        choices=OrderType.choices,
        default=OrderType.PRE_ORDER,
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING_SETTING,
    )
    return_date = models.DateField(null=True, blank=True, default=None)

    class Meta:
        db_table = "orders"
        ordering = ["-order_date", "-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-order_date"], name="orders_order_date_idx"),
            models.Index(fields=["marketplace"], name="orders_marketplace_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="orders_quantity_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    @property
    def is_custom(self) -> bool:
        return bool(self.back_name or self.back_number)

    def __str__(self) -> str:
        return f"{self.order_id} {self.product_name} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail of the statuses an order has held.

    ``actor`` is the display name at the time of the change, kept even if
    the user is later removed (``user`` is then ``NULL``).
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="history",
    )
    sequence = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=OrderStatus.choices)
    actor = models.CharField(max_length=255)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["order", "sequence"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "sequence"],
                name="osh_order_sequence_uniq",
            ),
        ]

    @property
    def timestamp(self):
        return self.created_at

    def __str__(self) -> str:
        return f"{self.order_id} #{self.sequence}: {self.status} by {self.actor}"
