"""Trading models for PropToken."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import F  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .domain.order_book import BookOrder


class TokenizedProperty(models.Model):
    """Property whose ownership is split into tradable tokens."""

    class Status(models.TextChoices):
        ACTIVE = "active", _("Trading")
        PAUSED = "paused", _("Paused")

    property = models.OneToOneField(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="tokenization",
    )
    token_symbol = models.CharField(max_length=12, unique=True)
    total_supply = models.PositiveBigIntegerField()
    price_per_token = models.PositiveBigIntegerField(help_text=_("Issue price in minor units."))
    currency = models.CharField(max_length=3, default="NGN")
    minimum_investment = models.PositiveBigIntegerField(
        default=0,
        help_text=_("Smallest buy order value in minor units."),
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Tokenized property")
        verbose_name_plural = _("Tokenized properties")
        ordering = ["token_symbol"]

    def __str__(self) -> str:
        return self.token_symbol

    def is_tradable(self) -> bool:
        return self.status == self.Status.ACTIVE


class TokenHolding(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="token_holdings",
    )
    tokenized_property = models.ForeignKey(
        TokenizedProperty,
        on_delete=models.CASCADE,
        related_name="holdings",
    )
    tokens_owned = models.PositiveBigIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "tokenized_property"], name="unique_token_holding"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}: {self.tokens_owned} {self.tokenized_property_id}"


class MarketOrderQuerySet(models.QuerySet):
    def open(self):
        return self.filter(
            status__in=MarketOrder.OPEN_STATUSES,
            filled_quantity__lt=F("quantity"),
        )

    def as_book_orders(self):
        return [order.to_book_order() for order in self]


class MarketOrder(models.Model):
    """Limit order on the token secondary market."""

    class Side(models.TextChoices):
        BUY = "buy", _("Buy")
        SELL = "sell", _("Sell")

    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        PARTIAL = "partial", _("Partially filled")
        FILLED = "filled", _("Filled")
        CANCELLED = "cancelled", _("Cancelled")

    OPEN_STATUSES = (Status.ACTIVE, Status.PARTIAL)

    tokenized_property = models.ForeignKey(
        TokenizedProperty,
        on_delete=models.CASCADE,
        related_name="orders",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="market_orders",
    )
    side = models.CharField(max_length=4, choices=Side.choices)
    quantity = models.PositiveBigIntegerField()
    price_per_token = models.PositiveBigIntegerField()
    filled_quantity = models.PositiveBigIntegerField(default=0)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = MarketOrderQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(filled_quantity__lte=F("quantity")),
                name="market_order_fill_within_quantity",
            ),
        ]
        indexes = [
            models.Index(fields=["tokenized_property", "status", "side"], name="market_order_book_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.side} {self.quantity} @ {self.price_per_token}"

    @property
    def remaining_quantity(self) -> int:
        return self.quantity - self.filled_quantity

    @property
    def is_open(self) -> bool:
        return self.status in self.OPEN_STATUSES and self.remaining_quantity > 0

    def to_book_order(self) -> BookOrder:
        return BookOrder(side=self.side, price=self.price_per_token, quantity=self.remaining_quantity)
