"""Celery tasks for the payments domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from .domain.errors import PaymentError
from .models import Payment
from .services import verify_payment

logger = logging.getLogger(__name__)

RECONCILE_AFTER_MINUTES = 10


@shared_task(name="payments.reconcile_pending_payments")
def reconcile_pending_payments() -> dict[str, int]:
    """
    Verify checkouts whose webhook never arrived.

    Returns:
        dict: {"checked": payments verified, "errors": provider failures}
    """
    cutoff = timezone.now() - timedelta(minutes=RECONCILE_AFTER_MINUTES)
    pending = Payment.objects.filter(
        status=Payment.Status.PENDING,
        created_at__lte=cutoff,
    ).exclude(authorization_url="")

    checked = 0
    errors = 0
    for payment in pending:
        try:
            verify_payment(payment.reference)
            checked += 1
        except PaymentError as e:
            errors += 1
            logger.error(f"Error reconciling payment {payment.reference}: {e}", exc_info=True)

    if checked > 0:
        logger.info(f"Reconciled {checked} pending payments")

    return {"checked": checked, "errors": errors}
