"""Admin registration for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("reference", "reservation", "user", "amount", "currency", "status", "paid_at", "created_at")
    list_filter = ("status", "provider", "currency")
    search_fields = ("reference", "reservation__reference", "user__email")
    readonly_fields = (
        "reference",
        "amount",
        "currency",
        "authorization_url",
        "access_code",
        "provider_payload",
        "paid_at",
        "created_at",
        "updated_at",
    )
