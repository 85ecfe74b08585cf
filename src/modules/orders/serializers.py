"""Order DRF serializers for API output.

Input is validated by the handler chain and turned into Pydantic DTOs
(``dtos.py``); these serializers only render ``Order`` entities in the
camelCase shape clients expect, and describe the envelopes for the
OpenAPI schema.
"""

from __future__ import annotations

from rest_framework import serializers


class _OmitNullMixin:
    """Leave unset optional fields out of the rendered object."""

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {key: value for key, value in data.items() if value is not None}


class DishSerializer(_OmitNullMixin, serializers.Serializer):
    id = serializers.CharField(required=False, allow_null=True)
    name = serializers.CharField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_null=True)
    image_url = serializers.CharField(required=False, allow_null=True)
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        coerce_to_string=False,
        required=False,
        allow_null=True,
    )
    quantity = serializers.IntegerField(min_value=1)


class OrderSerializer(_OmitNullMixin, serializers.Serializer):
    """Read serializer for orders; ``status`` is omitted while unset."""

    id = serializers.CharField(read_only=True)
    deliverTo = serializers.CharField(source="deliver_to")
    mobileNumber = serializers.CharField(source="mobile_number")
    dishes = DishSerializer(many=True)
    status = serializers.CharField(required=False, allow_null=True)


# ---------------------------------------------------------------------------
# Envelopes (OpenAPI only)
# ---------------------------------------------------------------------------


class OrderEnvelopeSerializer(serializers.Serializer):
    data = OrderSerializer()


class OrderListEnvelopeSerializer(serializers.Serializer):
    data = OrderSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
