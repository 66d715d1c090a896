"""Report DRF serializers."""

from __future__ import annotations

from rest_framework import serializers


class ReportPeriodSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False, allow_null=True, default=None)
    end_date = serializers.DateField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and start > end:
            raise serializers.ValidationError(
                {"end_date": "end_date must not be before start_date."}
            )
        return attrs
