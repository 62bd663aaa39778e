"""
Order Book Depth

Pure functions that turn open limit orders into the depth table shown
on the trading screen and estimate what a market order of a given size
would cost against it. Prices are integer minor units per token.

Nothing here matches or settles orders.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .errors import InsufficientLiquidityError, TradeValidationError

HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"

    @property
    def opposite(self) -> "OrderSide":
        return OrderSide.SELL if self is OrderSide.BUY else OrderSide.BUY


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BookOrder:
    """Remaining part of one open limit order."""

    side: OrderSide
    price: int
    quantity: int

    def __post_init__(self):
        object.__setattr__(self, "side", OrderSide(self.side))
        if self.price <= 0:
            raise ValueError("Order price must be positive")
        if self.quantity <= 0:
            raise ValueError("Order quantity must be positive")


@dataclass(frozen=True)
class DepthLevel:
    price: int
    quantity: int
    order_count: int
    total: int
    cumulative_total: int
    depth_percent: Decimal

    def to_dict(self) -> dict:
        return {
            "price": self.price,
            "quantity": self.quantity,
            "order_count": self.order_count,
            "total": self.total,
            "cumulative_total": self.cumulative_total,
            "depth_percent": self.depth_percent,
        }


@dataclass(frozen=True)
class MarketDepth:
    """Aggregated book: bids best-first (descending), asks best-first (ascending)."""

    bids: Tuple[DepthLevel, ...] = ()
    asks: Tuple[DepthLevel, ...] = ()

    @property
    def best_bid(self) -> Optional[int]:
        return self.bids[0].price if self.bids else None

    @property
    def best_ask(self) -> Optional[int]:
        return self.asks[0].price if self.asks else None

    @property
    def spread(self) -> Optional[int]:
        # negative when resting orders cross; nothing here matches them
        if self.best_bid is None or self.best_ask is None:
            return None
        return self.best_ask - self.best_bid

    @property
    def mid_price(self) -> Optional[Decimal]:
        if self.best_bid is None or self.best_ask is None:
            return None
        return _quantize((Decimal(self.best_bid) + Decimal(self.best_ask)) / 2)

    @property
    def total_bid_quantity(self) -> int:
        return sum(level.quantity for level in self.bids)

    @property
    def total_ask_quantity(self) -> int:
        return sum(level.quantity for level in self.asks)

    def levels_for(self, side: OrderSide) -> Tuple[DepthLevel, ...]:
        return self.bids if OrderSide(side) is OrderSide.BUY else self.asks

    def to_dict(self) -> dict:
        return {
            "bids": [level.to_dict() for level in self.bids],
            "asks": [level.to_dict() for level in self.asks],
            "best_bid": self.best_bid,
            "best_ask": self.best_ask,
            "spread": self.spread,
            "mid_price": self.mid_price,
            "total_bid_quantity": self.total_bid_quantity,
            "total_ask_quantity": self.total_ask_quantity,
        }


@dataclass(frozen=True)
class ExecutionEstimate:
    side: OrderSide
    requested_quantity: int
    filled_quantity: int
    total_cost: int
    best_price: Optional[int]
    average_price: Optional[Decimal]
    impact_percent: Decimal
    fills: Tuple[Tuple[int, int], ...] = field(default=())

    @property
    def fully_filled(self) -> bool:
        return self.filled_quantity == self.requested_quantity

    def to_dict(self) -> dict:
        return {
            "side": self.side.value,
            "requested_quantity": self.requested_quantity,
            "filled_quantity": self.filled_quantity,
            "fully_filled": self.fully_filled,
            "total_cost": self.total_cost,
            "best_price": self.best_price,
            "average_price": self.average_price,
            "impact_percent": self.impact_percent,
            "fills": [{"price": price, "quantity": quantity} for price, quantity in self.fills],
        }


def _aggregate(orders: Iterable[BookOrder], descending: bool) -> List[DepthLevel]:
    grouped: "OrderedDict[int, List[int]]" = OrderedDict()
    for order in sorted(orders, key=lambda o: o.price, reverse=descending):
        bucket = grouped.setdefault(order.price, [0, 0])
        bucket[0] += order.quantity
        bucket[1] += 1

    if not grouped:
        return []

    max_quantity = max(quantity for quantity, _ in grouped.values())
    levels = []
    cumulative = 0
    for price, (quantity, count) in grouped.items():
        total = price * quantity
        cumulative += total
        levels.append(
            DepthLevel(
                price=price,
                quantity=quantity,
                order_count=count,
                total=total,
                cumulative_total=cumulative,
                depth_percent=_quantize(Decimal(quantity) / Decimal(max_quantity) * HUNDRED),
            )
        )
    return levels


def build_market_depth(orders: Iterable[BookOrder]) -> MarketDepth:
    """
    Aggregate open orders into price levels

    Orders at the same price collapse into one level. ``depth_percent`` is
    the level quantity relative to the largest level on the same side and
    only drives the visual bar.
    """
    orders = list(orders)
    bids = _aggregate((o for o in orders if o.side is OrderSide.BUY), descending=True)
    asks = _aggregate((o for o in orders if o.side is OrderSide.SELL), descending=False)
    return MarketDepth(bids=tuple(bids), asks=tuple(asks))


def estimate_market_order(depth: MarketDepth, side, quantity: int) -> ExecutionEstimate:
    """
    Walk the opposing side until ``quantity`` tokens are filled

    A buy consumes asks from the cheapest up, a sell consumes bids from the
    highest down. Impact is the distance of the average fill price from the
    best price of the walked side, in percent. When the book is too thin the
    estimate is returned unfilled with no average price and 100% impact.
    """
    side = OrderSide(side)
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise TradeValidationError("Quantity must be a positive whole number of tokens")

    levels = depth.levels_for(side.opposite)
    best_price = levels[0].price if levels else None

    remaining = quantity
    cost = 0
    fills = []
    for level in levels:
        if remaining == 0:
            break
        take = min(remaining, level.quantity)
        fills.append((level.price, take))
        cost += take * level.price
        remaining -= take

    filled = quantity - remaining
    if remaining > 0:
        return ExecutionEstimate(
            side=side,
            requested_quantity=quantity,
            filled_quantity=filled,
            total_cost=cost,
            best_price=best_price,
            average_price=None,
            impact_percent=HUNDRED,
            fills=tuple(fills),
        )

    average = Decimal(cost) / Decimal(quantity)
    impact = abs(average - Decimal(best_price)) / Decimal(best_price) * HUNDRED
    return ExecutionEstimate(
        side=side,
        requested_quantity=quantity,
        filled_quantity=filled,
        total_cost=cost,
        best_price=best_price,
        average_price=_quantize(average),
        impact_percent=_quantize(impact),
        fills=tuple(fills),
    )


def require_full_fill(estimate: ExecutionEstimate) -> ExecutionEstimate:
    if not estimate.fully_filled:
        raise InsufficientLiquidityError(
            f"Only {estimate.filled_quantity} of {estimate.requested_quantity} tokens available"
        )
    return estimate
