"""Domain services for the token secondary market."""

from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction  # type: ignore

from .domain.errors import TradeValidationError
from .domain.order_book import (
    ExecutionEstimate,
    MarketDepth,
    OrderSide,
    build_market_depth,
    estimate_market_order,
    require_full_fill,
)
from .models import MarketOrder, TokenHolding, TokenizedProperty

logger = logging.getLogger(__name__)


def market_depth(tokenized_property: TokenizedProperty, exclude_user=None) -> MarketDepth:
    orders = MarketOrder.objects.filter(tokenized_property=tokenized_property).open()
    if exclude_user is not None:
        orders = orders.exclude(user=exclude_user)
    return build_market_depth(orders.as_book_orders())


def estimate_order(
    tokenized_property: TokenizedProperty, side: str, quantity: int, exclude_user=None
) -> ExecutionEstimate:
    return estimate_market_order(market_depth(tokenized_property, exclude_user), side, quantity)


def sweep_price(tokenized_property: TokenizedProperty, side: str, quantity: int, exclude_user=None) -> int:
    """
    Limit price that crosses every level a market order of ``quantity`` needs

    Orders resting for ``exclude_user`` are skipped so a trader never
    prices a market order against their own book.
    """
    estimate = require_full_fill(estimate_order(tokenized_property, side, quantity, exclude_user))
    return estimate.fills[-1][0]


def _open_sell_quantity(user, tokenized_property: TokenizedProperty) -> int:
    qs = MarketOrder.objects.filter(
        user=user,
        tokenized_property=tokenized_property,
        side=MarketOrder.Side.SELL,
    ).open()
    return sum(order.remaining_quantity for order in qs)


def validate_trade(user, tokenized_property: TokenizedProperty, side: str, quantity: int, price: int) -> None:
    """
    Check the placement rules for a limit order

    Raises:
        TradeValidationError: with the first rule the order breaks
    """
    if not tokenized_property.is_tradable():
        raise TradeValidationError("Trading is paused for this property")
    if quantity <= 0:
        raise TradeValidationError("Quantity must be positive")
    if price <= 0:
        raise TradeValidationError("Price must be positive")

    side = OrderSide(side)
    if side is OrderSide.SELL:
        holding = TokenHolding.objects.filter(user=user, tokenized_property=tokenized_property).first()
        owned = holding.tokens_owned if holding else 0
        committed = _open_sell_quantity(user, tokenized_property)
        if quantity + committed > owned:
            raise TradeValidationError(
                f"Insufficient tokens: you own {owned}, {committed} already listed for sale"
            )
    elif quantity * price < tokenized_property.minimum_investment:
        raise TradeValidationError(
            f"Order value must be at least {tokenized_property.minimum_investment} "
            f"{tokenized_property.currency} minor units"
        )


def place_order(
    user,
    tokenized_property: TokenizedProperty,
    side: str,
    quantity: int,
    price: Optional[int] = None,
) -> MarketOrder:
    """
    Validate and record a limit order

    Without ``price`` the order is priced at the sweep price of the current
    book, which is how market orders are entered.
    """
    with transaction.atomic():
        # one placement per market at a time; holdings and open sells are read under this lock
        tokenized_property = TokenizedProperty.objects.select_for_update().get(pk=tokenized_property.pk)
        if price is None:
            price = sweep_price(tokenized_property, side, quantity, exclude_user=user)
        validate_trade(user, tokenized_property, side, quantity, price)
        order = MarketOrder.objects.create(
            tokenized_property=tokenized_property,
            user=user,
            side=OrderSide(side).value,
            quantity=quantity,
            price_per_token=price,
        )

    logger.info(
        f"Order {order.pk} placed: {order.side} {quantity} {tokenized_property.token_symbol} "
        f"@ {price} by user {user.pk}"
    )
    return order


def cancel_order(order: MarketOrder) -> None:
    if not order.is_open:
        raise TradeValidationError("Only open orders can be cancelled")
    order.status = MarketOrder.Status.CANCELLED
    order.save(update_fields=["status", "updated_at"])
    logger.info(f"Order {order.pk} cancelled")
