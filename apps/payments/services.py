"""Domain services for reservation payments."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.reservations.models import Reservation
from apps.reservations.services import confirm_reservation, mark_awaiting_payment

from . import paystack
from .domain.errors import PaymentError, PaymentVerificationError
from .models import Payment

logger = logging.getLogger(__name__)


def _callback_url() -> str:
    return f"{settings.SITE_URL.rstrip('/')}/payments/callback/"


def initialize_reservation_payment(reservation: Reservation, user) -> Payment:
    """
    Start (or resume) checkout for an unpaid reservation

    A reservation has at most one open pending payment: retries return it
    instead of charging the guest twice.
    """

    if reservation.guest_id != user.id:
        raise PaymentError("Only the guest can pay for this reservation")
    if not reservation.is_unpaid() or reservation.should_expire():
        raise PaymentError("Reservation is no longer awaiting payment")
    if reservation.currency != settings.PAYMENT_PROVIDER_CURRENCY:
        raise PaymentError(
            f"Reservation is priced in {reservation.currency}, "
            f"payments are collected in {settings.PAYMENT_PROVIDER_CURRENCY}"
        )

    with transaction.atomic():
        locked = Reservation.objects.select_for_update().get(pk=reservation.pk)
        existing = Payment.objects.filter(reservation=locked, status=Payment.Status.PENDING).first()
        if existing is not None:
            if existing.is_open:
                logger.info(f"Reusing open payment {existing.reference} for reservation {locked.reference}")
                return existing
            if not existing.is_stale_start():
                raise PaymentError("Checkout for this reservation is already being started, try again shortly")
            # the process that started it died before Paystack answered
            existing.status = Payment.Status.ABANDONED
            existing.failure_reason = "Checkout initialization never completed"
            existing.save(update_fields=["status", "failure_reason", "updated_at"])

        payment = Payment.objects.create(
            reservation=locked,
            user=user,
            amount=locked.total_amount,
            currency=locked.currency,
        )

    try:
        data = paystack.initialize_transaction(
            email=user.email,
            amount=payment.amount,
            currency=payment.currency,
            reference=payment.reference,
            callback_url=_callback_url(),
            metadata={
                "reservation_id": reservation.pk,
                "reservation_reference": reservation.reference,
                "payment_id": payment.pk,
            },
        )
    except PaymentError as exc:
        payment.status = Payment.Status.FAILED
        payment.failure_reason = str(exc)[:255]
        payment.save(update_fields=["status", "failure_reason", "updated_at"])
        raise

    payment.authorization_url = data.get("authorization_url", "")
    payment.access_code = data.get("access_code", "")
    payment.save(update_fields=["authorization_url", "access_code", "updated_at"])
    mark_awaiting_payment(reservation)

    logger.info(
        f"Payment {payment.reference} initialized for reservation {reservation.reference}, "
        f"amount {payment.money}"
    )
    return payment


def apply_transaction(payment: Payment, data: Dict[str, Any]) -> Payment:
    """
    Record a provider transaction against our payment

    The charged amount and currency must equal what we asked for; a
    successful charge confirms the reservation.
    """

    if payment.status == Payment.Status.SUCCESS:
        return payment

    provider_status = data.get("status")
    payment.provider_payload = data

    if provider_status == "success":
        if data.get("amount") != payment.amount or data.get("currency") != payment.currency:
            payment.status = Payment.Status.FAILED
            payment.failure_reason = (
                f"Charged {data.get('amount')} {data.get('currency')}, "
                f"expected {payment.amount} {payment.currency}"
            )
            payment.save(update_fields=["status", "failure_reason", "provider_payload", "updated_at"])
            logger.error(f"Payment {payment.reference} amount mismatch: {payment.failure_reason}")
            raise PaymentVerificationError(payment.failure_reason)

        with transaction.atomic():
            payment.status = Payment.Status.SUCCESS
            payment.paid_at = timezone.now()
            payment.save(update_fields=["status", "paid_at", "provider_payload", "updated_at"])
            reservation = Reservation.objects.select_for_update().get(pk=payment.reservation_id)
            if not confirm_reservation(reservation):
                logger.warning(
                    f"Payment {payment.reference} succeeded but reservation {reservation.reference} "
                    f"is {reservation.status}; refund required"
                )
        logger.info(f"Payment {payment.reference} verified")
        return payment

    if provider_status in ("failed", "abandoned", "reversed"):
        payment.status = (
            Payment.Status.ABANDONED if provider_status == "abandoned" else Payment.Status.FAILED
        )
        payment.failure_reason = (data.get("gateway_response") or provider_status)[:255]
        payment.save(update_fields=["status", "failure_reason", "provider_payload", "updated_at"])
        logger.info(f"Payment {payment.reference} {payment.status}")
        return payment

    payment.save(update_fields=["provider_payload", "updated_at"])
    return payment


def verify_payment(reference: str, user=None) -> Payment:
    """Ask the provider for the outcome of ``reference`` and apply it."""

    qs = Payment.objects.select_related("reservation")
    if user is not None:
        qs = qs.filter(user=user)
    try:
        payment = qs.get(reference=reference)
    except Payment.DoesNotExist:
        raise PaymentVerificationError("Payment record not found")

    data = paystack.verify_transaction(reference)
    return apply_transaction(payment, data)


def handle_webhook_event(event: str, data: Dict[str, Any]) -> Optional[Payment]:
    """Process a signature-checked webhook. Unknown events are ignored."""

    reference = (data or {}).get("reference")
    if event not in ("charge.success", "charge.failed") or not reference:
        logger.info(f"Ignoring Paystack webhook event {event}")
        return None

    payment = Payment.objects.filter(reference=reference).first()
    if payment is None:
        logger.warning(f"Payment record not found for webhook reference {reference}")
        return None

    if event == "charge.failed" and data.get("status") != "failed":
        data = dict(data, status="failed")
    return apply_transaction(payment, data)
