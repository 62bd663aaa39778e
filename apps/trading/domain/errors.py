"""Trading domain errors."""

from shared.domain.base import DomainError


class OrderBookError(DomainError):
    default_message = "Order book operation failed"


class InsufficientLiquidityError(OrderBookError):
    """Raised when the book cannot fill the requested size."""

    default_message = "Not enough liquidity to fill the order"


class TradeValidationError(OrderBookError):
    """Raised when an order breaks a placement rule."""

    default_message = "Order cannot be placed"
