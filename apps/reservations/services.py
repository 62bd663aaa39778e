"""Domain services for reservation workflows.

These functions wrap the pure pricing and availability rules with the
database: they load booked intervals, lock overlapping rows while a new
reservation is written and translate the PostgreSQL exclusion
constraint into the same conflict error the query check raises.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List, Optional

from django.conf import settings  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.value_objects import DateRange, GuestCount

from .domain.availability import ensure_available, validate_stay
from .domain.errors import DatesUnavailableError, GuestCapacityError, ReservationError
from .domain.pricing import PriceBreakdown, calculate_reservation_price
from .models import Reservation

logger = logging.getLogger(__name__)

OVERLAP_CONSTRAINT_NAME = "reservation_no_overlap"


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def blocking_reservations(property_obj, *, start: Optional[date] = None, end: Optional[date] = None):
    """Reservations holding dates of ``property_obj``, optionally within [start, end)."""

    qs = Reservation.objects.filter(
        property=property_obj,
        status__in=Reservation.BLOCKING_STATUSES,
    )
    if end is not None:
        qs = qs.filter(check_in__lt=end)
    if start is not None:
        qs = qs.filter(check_out__gt=start)
    return qs


def booked_intervals(property_obj, *, since: Optional[date] = None) -> List[DateRange]:
    """Booked intervals of a property, fetched fresh on every call."""

    rows = blocking_reservations(property_obj, start=since).order_by("check_in").values_list(
        "check_in", "check_out"
    )
    return [DateRange(check_in, check_out) for check_in, check_out in rows]


def ensure_property_is_available(
    property_obj,
    check_in: date,
    check_out: date,
    *,
    today: Optional[date] = None,
    exclude_reservation_id=None,
) -> DateRange:
    """
    Ensure the property is free for the given period

    Only reservations that can overlap the window are loaded, and they are
    locked when called inside a transaction so a concurrent writer waits.
    """

    today = today or timezone.localdate()
    qs = blocking_reservations(property_obj, start=check_in, end=check_out)
    if exclude_reservation_id is not None:
        qs = qs.exclude(pk=exclude_reservation_id)
    qs = _lock_queryset_if_possible(qs)

    booked = [DateRange(row.check_in, row.check_out) for row in qs]
    return ensure_available(check_in, check_out, booked, today)


def ensure_guest_capacity(property_obj, guests: GuestCount) -> None:
    if guests.total > property_obj.max_guests:
        raise GuestCapacityError(
            f"This property accepts at most {property_obj.max_guests} guests, "
            f"{guests.total} requested"
        )


def quote_reservation(property_obj, check_in: date, check_out: date, guests: GuestCount) -> PriceBreakdown:
    """Price a stay without persisting anything."""

    validate_stay(check_in, check_out, timezone.localdate())
    if not property_obj.is_bookable:
        raise ReservationError("Property is not available for booking")
    ensure_guest_capacity(property_obj, guests)
    return calculate_reservation_price(
        property_obj.pricing_config(),
        check_in,
        check_out,
        guests,
        expected_currency=settings.PAYMENT_PROVIDER_CURRENCY,
        platform_fee_percent=settings.RESERVATION_PLATFORM_FEE_PERCENT,
    )


def create_reservation(
    guest,
    property_obj,
    check_in: date,
    check_out: date,
    guests: GuestCount,
    *,
    note: str = "",
) -> Reservation:
    """
    Validate, price and persist a reservation in status PENDING

    Raises:
        InvalidStayError: past, empty or reversed dates
        GuestCapacityError: party larger than the property allows
        DatesUnavailableError: dates overlap a blocking reservation
        CurrencyMismatchError: property priced in a currency we cannot charge
    """

    breakdown = quote_reservation(property_obj, check_in, check_out, guests)
    expires_at = timezone.now() + timedelta(hours=settings.RESERVATION_HOLD_HOURS)

    try:
        with transaction.atomic():
            ensure_property_is_available(property_obj, check_in, check_out)
            reservation = Reservation.objects.create(
                guest=guest,
                property=property_obj,
                check_in=check_in,
                check_out=check_out,
                adults=guests.adults,
                children=guests.children,
                infants=guests.infants,
                nights=breakdown.nights,
                currency=breakdown.currency,
                accommodation_amount=breakdown.accommodation.amount,
                deposit_amount=breakdown.deposit.amount,
                service_charge_amount=breakdown.service_charge.amount,
                platform_fee_amount=breakdown.platform_fee.amount,
                total_amount=breakdown.total_amount.amount,
                line_items=[item.to_dict() for item in breakdown.line_items],
                note=note,
                expires_at=expires_at,
            )
    except IntegrityError as exc:
        if OVERLAP_CONSTRAINT_NAME in str(exc):
            logger.warning(
                f"Overlap constraint rejected reservation for property {property_obj.pk} "
                f"({check_in} - {check_out})"
            )
            raise DatesUnavailableError() from exc
        raise

    logger.info(
        f"Reservation {reservation.reference} created for property {property_obj.pk}, "
        f"guest {guest.pk}, {check_in} - {check_out}, total {reservation.total_money()}"
    )
    return reservation


def mark_awaiting_payment(reservation: Reservation) -> None:
    if reservation.status == Reservation.Status.PENDING:
        reservation.status = Reservation.Status.AWAITING_PAYMENT
        reservation.save(update_fields=["status", "updated_at"])


def confirm_reservation(reservation: Reservation) -> bool:
    """
    Mark a reservation paid and confirmed

    Returns False when the reservation can no longer be confirmed
    (cancelled or expired while the guest was paying).
    """

    if reservation.status == Reservation.Status.CONFIRMED:
        return True
    if not reservation.is_unpaid():
        logger.warning(
            f"Payment received for reservation {reservation.reference} in status {reservation.status}"
        )
        return False

    reservation.status = Reservation.Status.CONFIRMED
    reservation.payment_status = Reservation.PaymentStatus.PAID
    reservation.confirmed_at = timezone.now()
    reservation.save(update_fields=["status", "payment_status", "confirmed_at", "updated_at"])
    logger.info(f"Reservation {reservation.reference} confirmed")
    return True


def cancel_reservation(reservation: Reservation, source: str, reason: str = "") -> None:
    if reservation.status in (
        Reservation.Status.COMPLETED,
        Reservation.Status.EXPIRED,
        Reservation.Status.CANCELLED,
    ):
        raise ReservationError("Completed, expired or cancelled reservations cannot be cancelled")
    if reservation.status == Reservation.Status.ACTIVE:
        raise ReservationError("A stay in progress cannot be cancelled")

    reservation.status = Reservation.Status.CANCELLED
    reservation.cancellation_source = source
    reservation.cancellation_reason = reason[:255]
    reservation.cancelled_at = timezone.now()
    reservation.save(
        update_fields=[
            "status",
            "cancellation_source",
            "cancellation_reason",
            "cancelled_at",
            "updated_at",
        ]
    )
    logger.info(f"Reservation {reservation.reference} cancelled by {source}")


def expire_reservation(reservation: Reservation, now=None) -> bool:
    """
    Release the dates of an unpaid reservation

    The row is re-read under lock: a payment confirmed after the caller
    loaded ``reservation`` wins, and False is returned.
    """
    now = now or timezone.now()
    with transaction.atomic():
        locked = _lock_queryset_if_possible(Reservation.objects.filter(pk=reservation.pk)).get()
        if not locked.is_unpaid():
            logger.info(f"Reservation {locked.reference} is {locked.status}, not expiring")
            reservation.refresh_from_db()
            return False

        locked.status = Reservation.Status.EXPIRED
        locked.payment_status = Reservation.PaymentStatus.FAILED
        locked.cancellation_source = Reservation.CancellationSource.SYSTEM
        locked.cancellation_reason = "Payment window elapsed"
        locked.cancelled_at = now
        locked.save(
            update_fields=[
                "status",
                "payment_status",
                "cancellation_source",
                "cancellation_reason",
                "cancelled_at",
                "updated_at",
            ]
        )
    reservation.refresh_from_db()
    return True
