"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "owner",
        "city",
        "status",
        "price_amount",
        "currency",
        "price_period",
        "max_guests",
        "created_at",
    )
    list_filter = ("status", "city", "currency", "price_period")
    search_fields = ("title", "city", "address_line", "owner__email")
    prepopulated_fields = {"slug": ("title",)}
    readonly_fields = ("published_at", "created_at", "updated_at")
    actions = ["make_active", "make_inactive"]

    @admin.action(description="Publish selected properties")
    def make_active(self, request, queryset):  # type: ignore
        for property_obj in queryset:
            property_obj.activate()

    @admin.action(description="Unpublish selected properties")
    def make_inactive(self, request, queryset):  # type: ignore
        for property_obj in queryset:
            property_obj.deactivate()
