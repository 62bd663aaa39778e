"""Serializers for the reservation domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.properties.models import Property
from shared.domain.value_objects import GuestCount

from .domain.errors import ReservationError
from .models import Reservation
from .services import create_reservation, quote_reservation


class StayRequestSerializer(serializers.Serializer):
    """Property, dates and party size shared by quote and create requests."""

    property = serializers.PrimaryKeyRelatedField(queryset=Property.objects.all())
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    adults = serializers.IntegerField(min_value=1, default=1)
    children = serializers.IntegerField(min_value=0, default=0)
    infants = serializers.IntegerField(min_value=0, default=0)

    def guests(self) -> GuestCount:
        data = self.validated_data
        return GuestCount(data["adults"], data["children"], data["infants"])


class LineItemSerializer(serializers.Serializer):
    description = serializers.CharField()
    amount = serializers.IntegerField()


class ReservationQuoteSerializer(StayRequestSerializer):
    """Computes a price breakdown without touching availability."""

    def quote(self) -> dict:
        data = self.validated_data
        try:
            breakdown = quote_reservation(
                data["property"],
                data["check_in"],
                data["check_out"],
                self.guests(),
            )
        except ReservationError as exc:
            raise serializers.ValidationError({"non_field_errors": [str(exc)]})
        return breakdown.to_dict()


class ReservationCreateSerializer(StayRequestSerializer):
    """Validates a stay request and persists the reservation."""

    note = serializers.CharField(required=False, allow_blank=True, default="")

    def create(self, validated_data):  # type: ignore
        request = self.context["request"]
        try:
            return create_reservation(
                request.user,
                validated_data["property"],
                validated_data["check_in"],
                validated_data["check_out"],
                self.guests(),
                note=validated_data.get("note", ""),
            )
        except ReservationError as exc:
            raise serializers.ValidationError({"non_field_errors": [str(exc)]})


class ReservationSerializer(serializers.ModelSerializer):
    """Read serializer for reservations."""

    guest_id = serializers.ReadOnlyField(source="guest.id")
    property_id = serializers.ReadOnlyField(source="property.id")
    property_title = serializers.ReadOnlyField(source="property.title")
    line_items = LineItemSerializer(many=True, read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "reference",
            "guest_id",
            "property_id",
            "property_title",
            "check_in",
            "check_out",
            "adults",
            "children",
            "infants",
            "nights",
            "currency",
            "accommodation_amount",
            "deposit_amount",
            "service_charge_amount",
            "platform_fee_amount",
            "total_amount",
            "line_items",
            "status",
            "payment_status",
            "note",
            "expires_at",
            "confirmed_at",
            "cancelled_at",
            "cancellation_source",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReservationCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
