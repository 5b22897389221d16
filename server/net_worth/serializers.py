from __future__ import annotations

from rest_framework import serializers

from networth_core.domain.models import Interval


class ProjectionQuerySerializer(serializers.Serializer):
    """Omitted or blank values come back as None so the configured defaults apply."""

    timeframes = serializers.CharField(required=False, allow_blank=True)
    interval = serializers.ChoiceField(choices=[i.value for i in Interval], required=False, allow_null=True)

    def validate_timeframes(self, value: str):
        years = []
        for token in value.split(","):
            token = token.strip()
            if not token:
                continue
            try:
                years.append(int(token))
            except ValueError:
                raise serializers.ValidationError(f"Invalid timeframes: {token}") from None
        return years or None
