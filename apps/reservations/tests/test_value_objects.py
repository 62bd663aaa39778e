"""Tests for the shared value objects used by reservations."""

from datetime import date
from decimal import Decimal

import pytest

from shared.domain.value_objects import DateRange, GuestCount, Money


def test_money_rejects_floats_and_negative_amounts():
    with pytest.raises(TypeError):
        Money(10.5, "NGN")
    with pytest.raises(TypeError):
        Money(True, "NGN")
    with pytest.raises(ValueError):
        Money(-1, "NGN")


def test_money_rejects_unknown_currency():
    with pytest.raises(ValueError):
        Money(100, "XYZ")


def test_money_arithmetic_requires_same_currency():
    assert Money(100, "NGN") + Money(50, "NGN") == Money(150, "NGN")
    assert 3 * Money(5000, "NGN") == Money(15000, "NGN")
    with pytest.raises(ValueError):
        Money(100, "NGN") + Money(100, "USD")


def test_percent_of_rounds_half_up_once():
    assert Money(15000, "NGN").percent_of(1) == Money(150, "NGN")
    assert Money(50, "NGN").percent_of(1) == Money(1, "NGN")
    assert Money(49, "NGN").percent_of(1) == Money(0, "NGN")
    assert Money(1000, "NGN").percent_of(Decimal("2.5")) == Money(25, "NGN")
    with pytest.raises(TypeError):
        Money(1000, "NGN").percent_of(1.5)


def test_money_format_uses_major_units():
    assert Money(1234567, "NGN").format() == "₦12,345.67"
    assert str(Money(5000, "USD")) == "$50.00"


def test_date_range_is_half_open():
    stay = DateRange(date(2024, 3, 10), date(2024, 3, 12))

    assert stay.contains(date(2024, 3, 11))
    assert not stay.contains(date(2024, 3, 12))
    assert len(stay) == 2
    assert list(stay.nights()) == [date(2024, 3, 10), date(2024, 3, 11)]
    assert not stay.overlaps_with(DateRange(date(2024, 3, 12), date(2024, 3, 14)))
    assert stay.overlaps_with(DateRange(date(2024, 3, 11), date(2024, 3, 14)))


def test_date_range_requires_start_before_end():
    with pytest.raises(ValueError):
        DateRange(date(2024, 3, 10), date(2024, 3, 10))


def test_guest_count_needs_an_adult_and_ignores_infants_in_total():
    assert GuestCount(2, 1, 1).total == 3
    with pytest.raises(ValueError):
        GuestCount(0, 2)
    with pytest.raises(ValueError):
        GuestCount(1, -1)
