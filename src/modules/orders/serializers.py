"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from modules.orders import lifecycle
from modules.orders.constants import (
    DEFAULT_EXPEDITION,
    DEFAULT_SIZE,
    SIZES,
    Department,
    OrderStatus,
    OrderType,
)
from modules.orders.models import Order, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order intake payload."""

    order_id = serializers.CharField(max_length=100)
    product_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    product_name = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )
    size = serializers.CharField(max_length=8, default=DEFAULT_SIZE)
    quantity = serializers.IntegerField(min_value=1, default=1)
    back_name = serializers.CharField(
        max_length=100, required=False, allow_blank=True, default=""
    )
    back_number = serializers.CharField(
        max_length=20, required=False, allow_blank=True, default=""
    )
    marketplace = serializers.CharField(max_length=100)
    expedition = serializers.CharField(max_length=100, default=DEFAULT_EXPEDITION)
    tracking_number = serializers.CharField(
        max_length=100, required=False, allow_blank=True, default=""
    )
    order_date = serializers.DateField(default=timezone.localdate)
    order_type = serializers.ChoiceField(
        choices=OrderType.choices, default=OrderType.PRE_ORDER
    )

    def validate_size(self, value: str) -> str:
        value = value.strip().upper()
        if value not in SIZES:
            raise serializers.ValidationError(f"Size must be one of {', '.join(SIZES)}.")
        return value

    def validate(self, attrs):
        if not attrs.get("product_id") and not attrs.get("product_name", "").strip():
            raise serializers.ValidationError(
                {"product_name": "Either product_id or product_name is required."}
            )
        return attrs


class StageActionSerializer(serializers.Serializer):
    department = serializers.ChoiceField(
        choices=Department.choices, required=False, allow_null=True, default=None
    )


class NotesSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class ReturnOrderSerializer(NotesSerializer):
    # Missing date is a domain error, reported by the service
    return_date = serializers.DateField(required=False, allow_null=True, default=None)


class OverrideStatusSerializer(NotesSerializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order history entries."""

    timestamp = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = OrderStatusHistory
        fields = ["sequence", "status", "actor", "timestamp", "notes"]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Order without its history, plus derived display fields."""

    status_label = serializers.CharField(source="get_status_display", read_only=True)
    is_overdue = serializers.SerializerMethodField()
    progress = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_id",
            "product_ref",
            "product_name",
            "size",
            "quantity",
            "back_name",
            "back_number",
            "marketplace",
            "expedition",
            "tracking_number",
            "order_date",
            "order_type",
            "status",
            "status_label",
            "return_date",
            "is_overdue",
            "progress",
            "created_at",
        ]
        read_only_fields = fields

    def get_is_overdue(self, obj: Order) -> bool:
        today = self.context.get("today") or timezone.localdate()
        return lifecycle.is_overdue(obj.order_date, obj.status, today)

    def get_progress(self, obj: Order) -> int:
        return lifecycle.progress_percentage(obj.status)


class OrderSerializer(OrderListSerializer):
    """Read serializer for a single order with its history."""

    history = StatusHistorySerializer(many=True, read_only=True)

    class Meta(OrderListSerializer.Meta):
        fields = OrderListSerializer.Meta.fields + ["history"]
        read_only_fields = fields
