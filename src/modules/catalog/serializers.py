"""Catalog DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.models import CatalogProduct, ProductCategory


class CatalogProductSerializer(serializers.ModelSerializer):
    """Read serializer for the catalog product resource."""

    class Meta:
        model = CatalogProduct
        fields = [
            "id",
            "name",
            "category",
            "image",
            "description",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CatalogProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    category = serializers.ChoiceField(
        choices=ProductCategory.choices, default=ProductCategory.JERSEY
    )
    image = serializers.CharField(required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")
