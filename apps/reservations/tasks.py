"""Celery tasks for the reservation domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Reservation
from .services import expire_reservation

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (scheduled by Celery Beat)
# ============================================================================

@shared_task(name="reservations.expire_unpaid_reservations")
def expire_unpaid_reservations() -> dict[str, int]:
    """
    Expire reservations whose payment window has elapsed.

    Expired reservations stop blocking their dates, so the property
    becomes bookable again.

    Returns:
        dict: {"expired": number of expired reservations}
    """
    now = timezone.now()
    expired_count = 0

    overdue = Reservation.objects.filter(
        status__in=Reservation.UNPAID_STATUSES,
        expires_at__lte=now,
    ).select_related("property", "guest")

    for reservation in overdue:
        try:
            if not expire_reservation(reservation, now):
                continue
            expired_count += 1
            logger.info(
                f"Reservation {reservation.reference} expired automatically. "
                f"Guest: {reservation.guest.email}, Property: {reservation.property.title}"
            )
        except Exception as e:
            logger.error(f"Error expiring reservation {reservation.id}: {e}", exc_info=True)

    if expired_count > 0:
        logger.info(f"Expired {expired_count} unpaid reservations")

    return {"expired": expired_count}


@shared_task(name="reservations.start_checked_in_reservations")
def start_checked_in_reservations() -> dict[str, int]:
    """Move confirmed reservations whose check-in has arrived to ACTIVE."""
    today = timezone.localdate()
    updated = Reservation.objects.filter(
        status=Reservation.Status.CONFIRMED,
        check_in__lte=today,
        check_out__gt=today,
    ).update(status=Reservation.Status.ACTIVE, updated_at=timezone.now())

    if updated > 0:
        logger.info(f"Started {updated} reservations")

    return {"updated": updated}


@shared_task(name="reservations.complete_finished_reservations")
def complete_finished_reservations() -> dict[str, int]:
    """Complete paid reservations once the check-out date is reached."""
    today = timezone.localdate()
    completed = Reservation.objects.filter(
        status__in=[Reservation.Status.CONFIRMED, Reservation.Status.ACTIVE],
        check_out__lte=today,
    ).update(status=Reservation.Status.COMPLETED, updated_at=timezone.now())

    if completed > 0:
        logger.info(f"Completed {completed} reservations")

    return {"completed": completed}
