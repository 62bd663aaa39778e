"""
Reservation Availability

Decides whether a requested stay can be booked against the intervals
already held by blocking reservations, and expands those intervals into
the per-day list the date picker disables.

Intervals are half-open [check_in, check_out): the check-out day of one
stay can be the check-in day of the next. The PostgreSQL exclusion
constraint on reservations uses the same '[)' bound, so the in-memory
answer and the database agree.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Tuple

from shared.domain.value_objects import DateRange

from .errors import DatesUnavailableError, InvalidStayError


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    reason: Optional[str] = None
    conflicts: Tuple[DateRange, ...] = field(default_factory=tuple)

    def __bool__(self):
        return self.available


def validate_stay(check_in: date, check_out: date, today: date) -> DateRange:
    """
    Validate the requested dates on their own

    Returns:
        The stay as a DateRange

    Raises:
        InvalidStayError: check-in in the past, zero-night or reversed range
    """
    if check_in < today:
        raise InvalidStayError("Check-in date cannot be in the past")
    if check_in == check_out:
        raise InvalidStayError("A reservation must cover at least one night")
    if check_out < check_in:
        raise InvalidStayError("Check-out date must be after check-in date")
    return DateRange(check_in, check_out)


def find_conflicts(candidate: DateRange, booked: Iterable[DateRange]) -> List[DateRange]:
    return [interval for interval in booked if interval.overlaps_with(candidate)]


def check_availability(
    check_in: date,
    check_out: date,
    booked: Iterable[DateRange],
    today: date,
) -> AvailabilityResult:
    """
    Check a requested stay against booked intervals

    Never raises for rule violations; the result carries the reason.
    """
    try:
        candidate = validate_stay(check_in, check_out, today)
    except InvalidStayError as exc:
        return AvailabilityResult(available=False, reason=exc.message)

    conflicts = find_conflicts(candidate, booked)
    if conflicts:
        return AvailabilityResult(
            available=False,
            reason=DatesUnavailableError.default_message,
            conflicts=tuple(conflicts),
        )
    return AvailabilityResult(available=True)


def ensure_available(
    check_in: date,
    check_out: date,
    booked: Iterable[DateRange],
    today: date,
) -> DateRange:
    """Raising variant of check_availability; returns the validated stay."""
    candidate = validate_stay(check_in, check_out, today)
    if find_conflicts(candidate, booked):
        raise DatesUnavailableError()
    return candidate


def disabled_dates(booked: Iterable[DateRange]) -> List[date]:
    """Every occupied night across the booked intervals, sorted and unique."""
    nights = set()
    for interval in booked:
        nights.update(interval.nights())
    return sorted(nights)


def is_date_selectable(day: date, booked: Iterable[DateRange], today: date) -> bool:
    """Whether the date picker may start a selection on ``day``."""
    if day < today:
        return False
    return not any(interval.contains(day) for interval in booked)
