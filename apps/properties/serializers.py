"""Serializers for the properties domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Property


class PropertySerializer(serializers.ModelSerializer):
    """Read serializer."""

    owner_id = serializers.ReadOnlyField(source="owner.id")

    class Meta:
        model = Property
        fields = [
            "id",
            "owner_id",
            "title",
            "slug",
            "description",
            "status",
            "city",
            "address_line",
            "bedrooms",
            "max_guests",
            "price_amount",
            "currency",
            "deposit_amount",
            "service_charge_amount",
            "price_period",
            "published_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PropertyWriteSerializer(serializers.ModelSerializer):
    """Serializer for create/update operations by agents."""

    class Meta:
        model = Property
        fields = [
            "title",
            "slug",
            "description",
            "city",
            "address_line",
            "bedrooms",
            "max_guests",
            "price_amount",
            "currency",
            "deposit_amount",
            "service_charge_amount",
            "price_period",
        ]
        extra_kwargs = {
            "slug": {"required": False, "allow_blank": True},
        }

    def validate_max_guests(self, value: int) -> int:
        if value < 1:
            raise serializers.ValidationError("A property must accept at least one guest.")
        return value

    def create(self, validated_data):  # type: ignore
        request = self.context["request"]
        return Property.objects.create(owner=request.user, **validated_data)


class BookedRangeSerializer(serializers.Serializer):
    """One occupied interval, check_out exclusive."""

    check_in = serializers.DateField(source="start_date")
    check_out = serializers.DateField(source="end_date")


class BookedDatesSerializer(serializers.Serializer):
    """Payload consumed by the reservation date picker."""

    property_id = serializers.IntegerField()
    today = serializers.DateField()
    booked_ranges = BookedRangeSerializer(many=True)
    disabled_dates = serializers.ListField(child=serializers.DateField())
