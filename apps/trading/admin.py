"""Admin registration for the token market."""

from __future__ import annotations

from django.contrib import admin

from .models import MarketOrder, TokenHolding, TokenizedProperty


@admin.register(TokenizedProperty)
class TokenizedPropertyAdmin(admin.ModelAdmin):
    list_display = ("token_symbol", "property", "total_supply", "price_per_token", "currency", "status")
    list_filter = ("status", "currency")
    search_fields = ("token_symbol", "property__title")


@admin.register(TokenHolding)
class TokenHoldingAdmin(admin.ModelAdmin):
    list_display = ("user", "tokenized_property", "tokens_owned", "updated_at")
    search_fields = ("user__email", "tokenized_property__token_symbol")


@admin.register(MarketOrder)
class MarketOrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "tokenized_property",
        "user",
        "side",
        "quantity",
        "price_per_token",
        "filled_quantity",
        "status",
        "created_at",
    )
    list_filter = ("side", "status")
    search_fields = ("user__email", "tokenized_property__token_symbol")
