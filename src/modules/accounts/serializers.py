"""Account DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.constants import ViewType
from modules.orders.constants import OrderType


class OrderDraftSerializer(serializers.Serializer):
    """Loose validation: a draft may be incomplete."""

    order_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    product_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    product_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    size = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    quantity = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    back_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    back_number = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    marketplace = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    expedition = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    tracking_number = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    order_date = serializers.DateField(required=False, allow_null=True)
    order_type = serializers.ChoiceField(
        choices=OrderType.choices, required=False, allow_null=True
    )


class WorkspaceSerializer(serializers.Serializer):
    last_view = serializers.ChoiceField(
        choices=ViewType.choices, required=False, allow_null=True
    )
    order_draft = OrderDraftSerializer(required=False, allow_null=True)


class MeSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    username = serializers.CharField()
    role = serializers.CharField()
    role_label = serializers.CharField()
    display_name = serializers.CharField()
    default_view = serializers.CharField()
    allowed_views = serializers.ListField(child=serializers.CharField())
