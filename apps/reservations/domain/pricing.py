"""
Reservation Price Calculation

Pure functions that turn a property's pricing config, a stay and a
party into an itemized quote. Every amount is integer minor units:

    accommodation = units x rate
    platform_fee  = fee_percent % of accommodation (rounded half-up)
    total         = accommodation + deposit + service_charge + platform_fee

The same breakdown is shown to the guest, stored on the reservation
and sent to the payment provider, so it must be deterministic.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from math import ceil
from typing import Tuple

from shared.domain.value_objects import GuestCount, Money

from .errors import CurrencyMismatchError, InvalidStayError

DEFAULT_PLATFORM_FEE_PERCENT = Decimal("1")
DAYS_PER_BILLING_MONTH = 30


class PricingPeriod(str, Enum):
    NIGHT = "night"
    MONTH = "month"


@dataclass(frozen=True)
class PricingConfig:
    """
    Immutable pricing owned by a property

    ``amount`` is the rate per ``period``; deposit and service
    charge are flat per reservation.
    """
    amount: Money
    deposit: Money
    service_charge: Money
    period: PricingPeriod = PricingPeriod.NIGHT

    def __post_init__(self):
        currencies = {self.amount.currency, self.deposit.currency, self.service_charge.currency}
        if len(currencies) != 1:
            raise CurrencyMismatchError(
                f"Pricing mixes currencies: {', '.join(sorted(currencies))}"
            )

    @property
    def currency(self) -> str:
        return self.amount.currency

    @classmethod
    def build(
        cls,
        amount: int,
        currency: str,
        *,
        deposit: int = 0,
        service_charge: int = 0,
        period: str = PricingPeriod.NIGHT,
    ) -> "PricingConfig":
        return cls(
            amount=Money(amount, currency),
            deposit=Money(deposit or 0, currency),
            service_charge=Money(service_charge or 0, currency),
            period=PricingPeriod(period or PricingPeriod.NIGHT),
        )


@dataclass(frozen=True)
class LineItem:
    description: str
    amount: Money

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "amount": self.amount.amount,
            "currency": self.amount.currency,
        }


@dataclass(frozen=True)
class PriceBreakdown:
    """Itemized reservation quote, recomputed on every input change."""

    nights: int
    billed_units: int
    period: PricingPeriod
    accommodation: Money
    deposit: Money
    service_charge: Money
    platform_fee: Money
    total_amount: Money
    line_items: Tuple[LineItem, ...]

    @property
    def currency(self) -> str:
        return self.total_amount.currency

    def to_dict(self) -> dict:
        return {
            "nights": self.nights,
            "billed_units": self.billed_units,
            "period": self.period.value,
            "currency": self.currency,
            "accommodation_amount": self.accommodation.amount,
            "deposit_amount": self.deposit.amount,
            "service_charge_amount": self.service_charge.amount,
            "platform_fee_amount": self.platform_fee.amount,
            "total_amount": self.total_amount.amount,
            "line_items": [item.to_dict() for item in self.line_items],
        }


def count_nights(check_in: date, check_out: date) -> int:
    """
    Whole nights between two calendar dates

    Raises InvalidStayError for zero or negative stays so callers never
    price an empty reservation.
    """
    nights = (check_out - check_in).days
    if nights <= 0:
        raise InvalidStayError("A reservation must cover at least one night")
    return nights


def billed_units(nights: int, period: PricingPeriod) -> int:
    if period == PricingPeriod.MONTH:
        return ceil(nights / DAYS_PER_BILLING_MONTH)
    return nights


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def calculate_reservation_price(
    pricing: PricingConfig,
    check_in: date,
    check_out: date,
    guests: GuestCount = None,
    *,
    expected_currency: str = None,
    platform_fee_percent=DEFAULT_PLATFORM_FEE_PERCENT,
) -> PriceBreakdown:
    """
    Calculate an itemized reservation price

    Args:
        pricing: Property pricing config
        check_in: First night of the stay
        check_out: Departure day (not charged)
        guests: Party; validated elsewhere against capacity, does not
            change the price
        expected_currency: Currency the payment provider will charge in.
            A mismatch raises instead of converting.
        platform_fee_percent: Fee charged on the accommodation subtotal only

    Returns:
        PriceBreakdown with line items in display order

    Raises:
        InvalidStayError: zero or negative nights
        CurrencyMismatchError: pricing currency differs from expected_currency
    """
    nights = count_nights(check_in, check_out)

    if expected_currency and pricing.currency != expected_currency:
        raise CurrencyMismatchError(
            f"Property is priced in {pricing.currency} but payments are taken in {expected_currency}"
        )

    units = billed_units(nights, pricing.period)
    accommodation = pricing.amount * units
    platform_fee = accommodation.percent_of(platform_fee_percent)
    total = accommodation + pricing.deposit + pricing.service_charge + platform_fee

    if pricing.period == PricingPeriod.MONTH:
        label = f"{pricing.amount.format()} x {_plural(units, 'month')} ({_plural(nights, 'night')})"
    else:
        label = f"{pricing.amount.format()} x {_plural(nights, 'night')}"

    items = [LineItem(label, accommodation)]
    if pricing.deposit.amount > 0:
        items.append(LineItem("Security deposit", pricing.deposit))
    if pricing.service_charge.amount > 0:
        items.append(LineItem("Service charge", pricing.service_charge))
    if platform_fee.amount > 0:
        items.append(LineItem(f"Platform fee ({Decimal(platform_fee_percent).normalize():f}%)", platform_fee))

    return PriceBreakdown(
        nights=nights,
        billed_units=units,
        period=pricing.period,
        accommodation=accommodation,
        deposit=pricing.deposit,
        service_charge=pricing.service_charge,
        platform_fee=platform_fee,
        total_amount=total,
        line_items=tuple(items),
    )

