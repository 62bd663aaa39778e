from decimal import Decimal

import pytest

from apps.trading.domain.errors import InsufficientLiquidityError, TradeValidationError
from apps.trading.domain.order_book import (
    BookOrder,
    MarketDepth,
    OrderSide,
    build_market_depth,
    estimate_market_order,
    require_full_fill,
)


@pytest.fixture
def depth():
    return build_market_depth(
        [
            BookOrder("buy", 100, 5),
            BookOrder("buy", 95, 10),
            BookOrder("buy", 100, 3),
            BookOrder("sell", 120, 6),
            BookOrder("sell", 105, 4),
            BookOrder("sell", 105, 2),
        ]
    )


def test_orders_at_the_same_price_collapse_into_one_level(depth):
    assert [(level.price, level.quantity, level.order_count) for level in depth.bids] == [
        (100, 8, 2),
        (95, 10, 1),
    ]
    assert [(level.price, level.quantity, level.order_count) for level in depth.asks] == [
        (105, 6, 2),
        (120, 6, 1),
    ]


def test_levels_carry_running_totals_and_relative_depth(depth):
    assert [level.total for level in depth.bids] == [800, 950]
    assert [level.cumulative_total for level in depth.bids] == [800, 1750]
    assert [level.depth_percent for level in depth.bids] == [Decimal("80.00"), Decimal("100.00")]
    assert [level.cumulative_total for level in depth.asks] == [630, 1350]


def test_spread_and_mid_price(depth):
    assert depth.best_bid == 100
    assert depth.best_ask == 105
    assert depth.spread == 5
    assert depth.mid_price == Decimal("102.50")
    assert depth.total_bid_quantity == 18
    assert depth.total_ask_quantity == 12


def test_one_sided_book_has_no_spread():
    depth = build_market_depth([BookOrder(OrderSide.SELL, 50, 1)])

    assert depth.best_bid is None
    assert depth.spread is None
    assert depth.mid_price is None
    assert depth.to_dict()["bids"] == []


def test_buy_walks_asks_from_the_cheapest(depth):
    estimate = estimate_market_order(depth, "buy", 8)

    assert estimate.fully_filled
    assert estimate.fills == ((105, 6), (120, 2))
    assert estimate.total_cost == 870
    assert estimate.best_price == 105
    assert estimate.average_price == Decimal("108.75")
    assert estimate.impact_percent == Decimal("3.57")


def test_sell_walks_bids_from_the_highest(depth):
    estimate = estimate_market_order(depth, OrderSide.SELL, 12)

    assert estimate.fills == ((100, 8), (95, 4))
    assert estimate.total_cost == 1180
    assert estimate.average_price == Decimal("98.33")
    assert estimate.impact_percent == Decimal("1.67")


def test_order_inside_the_top_level_has_no_impact(depth):
    estimate = estimate_market_order(depth, "buy", 3)

    assert estimate.average_price == Decimal("105.00")
    assert estimate.impact_percent == Decimal("0.00")


def test_thin_book_returns_partial_estimate(depth):
    estimate = estimate_market_order(depth, "buy", 20)

    assert not estimate.fully_filled
    assert estimate.filled_quantity == 12
    assert estimate.total_cost == 1350
    assert estimate.average_price is None
    assert estimate.impact_percent == Decimal("100")
    with pytest.raises(InsufficientLiquidityError, match="Only 12 of 20"):
        require_full_fill(estimate)


def test_empty_book_fills_nothing():
    estimate = estimate_market_order(MarketDepth(), "sell", 1)

    assert estimate.filled_quantity == 0
    assert estimate.best_price is None
    assert estimate.fills == ()


@pytest.mark.parametrize("quantity", [0, -3, 1.5, True])
def test_quantity_must_be_a_positive_integer(depth, quantity):
    with pytest.raises(TradeValidationError):
        estimate_market_order(depth, "buy", quantity)


def test_book_orders_reject_non_positive_values():
    with pytest.raises(ValueError):
        BookOrder("buy", 0, 1)
    with pytest.raises(ValueError):
        BookOrder("sell", 10, 0)


def test_crossed_book_reports_negative_spread():
    depth = build_market_depth([BookOrder("buy", 110, 1), BookOrder("sell", 100, 1)])

    assert depth.spread == -10
    assert depth.mid_price == Decimal("105.00")
