"""Reservation domain errors."""

from shared.domain.base import DomainError


class ReservationError(DomainError):
    """Base class for reservation rule violations."""

    default_message = "Reservation cannot be made"


class InvalidStayError(ReservationError):
    """Raised for empty, reversed or past date ranges."""

    default_message = "Check-out date must be after check-in date"


class DatesUnavailableError(ReservationError):
    """Raised when requested dates intersect an existing booking."""

    default_message = "Property is not available for the selected dates"


class CurrencyMismatchError(ReservationError):
    """Raised when a price would be charged in an unexpected currency."""

    default_message = "Property currency does not match the payment currency"


class GuestCapacityError(ReservationError):
    """Raised when the party is larger than the property allows."""

    default_message = "Number of guests exceeds the property capacity"
