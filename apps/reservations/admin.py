"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "reference",
        "property",
        "guest",
        "status",
        "payment_status",
        "check_in",
        "check_out",
        "total_amount",
        "currency",
        "created_at",
    )
    list_filter = ("status", "payment_status", "check_in", "check_out", "currency")
    search_fields = ("reference", "property__title", "guest__email")
    readonly_fields = (
        "reference",
        "nights",
        "accommodation_amount",
        "deposit_amount",
        "service_charge_amount",
        "platform_fee_amount",
        "total_amount",
        "line_items",
        "created_at",
        "updated_at",
    )
