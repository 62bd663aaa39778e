"""Serializers for the payments domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.reservations.models import Reservation

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    reservation_reference = serializers.ReadOnlyField(source="reservation.reference")

    class Meta:
        model = Payment
        fields = [
            "id",
            "reference",
            "reservation",
            "reservation_reference",
            "provider",
            "amount",
            "currency",
            "status",
            "authorization_url",
            "access_code",
            "failure_reason",
            "paid_at",
            "created_at",
        ]
        read_only_fields = fields


class PaymentInitializeSerializer(serializers.Serializer):
    reservation = serializers.PrimaryKeyRelatedField(queryset=Reservation.objects.all())

    def validate_reservation(self, value: Reservation) -> Reservation:
        request = self.context["request"]
        if value.guest_id != request.user.id:
            raise serializers.ValidationError("Reservation not found.")
        return value


class PaymentVerifySerializer(serializers.Serializer):
    reference = serializers.CharField(max_length=40)
