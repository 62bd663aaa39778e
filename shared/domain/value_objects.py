"""
Common Value Objects

Value objects used across multiple domains:
- Money: Monetary amount in integer minor units (kobo, cents) with currency
- DateRange: Range of dates (check-in to check-out)
- GuestCount: Party composition for a stay
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

from shared.domain.base import ValueObject

SUPPORTED_CURRENCIES = ('NGN', 'USD', 'EUR', 'GBP')

CURRENCY_SYMBOLS = {
    'NGN': '₦',
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
}


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Amounts are whole minor units (kobo for NGN, cents for USD).
    Floats are rejected so that rounding drift cannot creep in;
    percentages go through ``percent_of`` which rounds half-up once.
    """
    amount: int
    currency: str = 'NGN'

    def __post_init__(self):
        # bool is an int subclass, reject it explicitly
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"Money amount must be an integer number of minor units, got {self.amount!r}")
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    @classmethod
    def zero(cls, currency: str = 'NGN') -> 'Money':
        return cls(0, currency)

    def _check_currency(self, other: 'Money', operation: str):
        if not isinstance(other, Money):
            raise TypeError(f"Can only {operation} Money and Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot {operation} different currencies: {self.currency} and {other.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        self._check_currency(other, 'add')
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two money objects"""
        self._check_currency(other, 'subtract')
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor: int) -> 'Money':
        """Multiply money by a whole number of units"""
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError("Can only multiply Money by an integer")
        return Money(self.amount * factor, self.currency)

    __rmul__ = __mul__

    def percent_of(self, percent) -> 'Money':
        """
        Return ``percent`` % of this amount, rounded half-up to a minor unit

        ``percent`` may be an int or a Decimal (e.g. Decimal('1.5')).
        """
        if isinstance(percent, float):
            raise TypeError("Percent must be an int or Decimal, not float")
        value = (Decimal(self.amount) * Decimal(percent) / Decimal(100)).quantize(
            Decimal('1'), rounding=ROUND_HALF_UP
        )
        return Money(int(value), self.currency)

    def to_major(self) -> Decimal:
        """Major-unit Decimal for display only (never for arithmetic)"""
        return (Decimal(self.amount) / Decimal(100)).quantize(Decimal('0.01'))

    def format(self) -> str:
        symbol = CURRENCY_SYMBOLS.get(self.currency)
        if symbol:
            return f"{symbol}{self.to_major():,.2f}"
        return f"{self.to_major():,.2f} {self.currency}"

    def __str__(self):
        return self.format()

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    Used for reservation periods and booked intervals.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        end_date is exclusive, so a range ending on the day another
        starts does not overlap it (check-out day is free for check-in).

        Examples:
            - DateRange(10, 12) overlaps with DateRange(11, 14) -> True
            - DateRange(10, 12) overlaps with DateRange(12, 14) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return (self.start_date < other.end_date and
                self.end_date > other.start_date)

    def contains(self, check_date: date) -> bool:
        """start_date is inclusive, end_date is exclusive"""
        return self.start_date <= check_date < self.end_date

    def covers(self, other: 'DateRange') -> bool:
        """True when ``other`` lies entirely inside this range"""
        return self.start_date <= other.start_date and other.end_date <= self.end_date

    def nights(self) -> Iterator[date]:
        """Yield every occupied night (the check-out day is not one)"""
        current = self.start_date
        while current < self.end_date:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        """Number of nights in this range"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"


@dataclass(frozen=True)
class GuestCount(ValueObject):
    """
    Party composition for a stay

    Infants do not take a sleeping place, so ``total`` counts
    adults and children only.
    """
    adults: int = 1
    children: int = 0
    infants: int = 0

    def __post_init__(self):
        if self.adults < 1:
            raise ValueError("At least one adult is required")
        if self.children < 0 or self.infants < 0:
            raise ValueError("Guest counts cannot be negative")

    @property
    def total(self) -> int:
        return self.adults + self.children

    def __str__(self):
        return f"{self.adults} adults, {self.children} children, {self.infants} infants"
