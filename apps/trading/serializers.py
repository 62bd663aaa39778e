"""Serializers for the trading domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.errors import OrderBookError
from .models import MarketOrder, TokenizedProperty
from .services import place_order


class TokenizedPropertySerializer(serializers.ModelSerializer):
    property_title = serializers.ReadOnlyField(source="property.title")

    class Meta:
        model = TokenizedProperty
        fields = [
            "id",
            "property",
            "property_title",
            "token_symbol",
            "total_supply",
            "price_per_token",
            "currency",
            "minimum_investment",
            "status",
        ]
        read_only_fields = fields


class DepthLevelSerializer(serializers.Serializer):
    price = serializers.IntegerField()
    quantity = serializers.IntegerField()
    order_count = serializers.IntegerField()
    total = serializers.IntegerField()
    cumulative_total = serializers.IntegerField()
    depth_percent = serializers.DecimalField(max_digits=5, decimal_places=2)


class MarketDepthSerializer(serializers.Serializer):
    bids = DepthLevelSerializer(many=True)
    asks = DepthLevelSerializer(many=True)
    best_bid = serializers.IntegerField(allow_null=True)
    best_ask = serializers.IntegerField(allow_null=True)
    spread = serializers.IntegerField(allow_null=True)
    mid_price = serializers.DecimalField(max_digits=20, decimal_places=2, allow_null=True)
    total_bid_quantity = serializers.IntegerField()
    total_ask_quantity = serializers.IntegerField()


class EstimateQuerySerializer(serializers.Serializer):
    side = serializers.ChoiceField(choices=MarketOrder.Side.choices)
    quantity = serializers.IntegerField(min_value=1)


class MarketOrderSerializer(serializers.ModelSerializer):
    remaining_quantity = serializers.ReadOnlyField()

    class Meta:
        model = MarketOrder
        fields = [
            "id",
            "tokenized_property",
            "side",
            "quantity",
            "price_per_token",
            "filled_quantity",
            "remaining_quantity",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class MarketOrderCreateSerializer(serializers.Serializer):
    """Limit order; leave ``price_per_token`` empty for a market order."""

    tokenized_property = serializers.PrimaryKeyRelatedField(queryset=TokenizedProperty.objects.all())
    side = serializers.ChoiceField(choices=MarketOrder.Side.choices)
    quantity = serializers.IntegerField(min_value=1)
    price_per_token = serializers.IntegerField(min_value=1, required=False, allow_null=True)

    def create(self, validated_data):  # type: ignore
        request = self.context["request"]
        try:
            return place_order(
                request.user,
                validated_data["tokenized_property"],
                validated_data["side"],
                validated_data["quantity"],
                validated_data.get("price_per_token"),
            )
        except OrderBookError as exc:
            raise serializers.ValidationError({"non_field_errors": [str(exc)]})
