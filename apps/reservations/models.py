"""Reservation models for PropToken."""

from __future__ import annotations

import secrets

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import DateRange, GuestCount, Money


class Reservation(models.Model):
    """Short-stay reservation of a property."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        AWAITING_PAYMENT = "awaiting_payment", _("Awaiting payment")
        CONFIRMED = "confirmed", _("Confirmed")
        ACTIVE = "active", _("Guest checked in")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")
        EXPIRED = "expired", _("Expired (unpaid)")

    class PaymentStatus(models.TextChoices):
        UNPAID = "unpaid", _("Unpaid")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Payment failed")
        REFUNDED = "refunded", _("Refunded")

    class CancellationSource(models.TextChoices):
        GUEST = "guest", _("Guest")
        AGENT = "agent", _("Agent")
        SYSTEM = "system", _("System")

    # Statuses that hold the property's dates
    BLOCKING_STATUSES = (
        Status.PENDING,
        Status.AWAITING_PAYMENT,
        Status.CONFIRMED,
        Status.ACTIVE,
    )
    UNPAID_STATUSES = (
        Status.PENDING,
        Status.AWAITING_PAYMENT,
    )

    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reservations",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="reservations",
    )
    reference = models.CharField(max_length=12, unique=True, editable=False)
    check_in = models.DateField()
    check_out = models.DateField()
    adults = models.PositiveSmallIntegerField(default=1)
    children = models.PositiveSmallIntegerField(default=0)
    infants = models.PositiveSmallIntegerField(default=0)
    nights = models.PositiveSmallIntegerField()
    currency = models.CharField(max_length=3)
    accommodation_amount = models.PositiveBigIntegerField()
    deposit_amount = models.PositiveBigIntegerField(default=0)
    service_charge_amount = models.PositiveBigIntegerField(default=0)
    platform_fee_amount = models.PositiveBigIntegerField(default=0)
    total_amount = models.PositiveBigIntegerField()
    line_items = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=32, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
    )
    note = models.TextField(blank=True)
    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Unpaid reservations are expired by the system after this moment."),
    )
    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_source = models.CharField(
        max_length=20,
        choices=CancellationSource.choices,
        blank=True,
    )
    cancellation_reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="reservation_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(adults__gte=1),
                name="reservation_at_least_one_adult",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "check_in", "check_out"], name="reservation_stay_idx"),
            models.Index(fields=["status"], name="reservation_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation #{self.reference} for {self.property_id}"

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and not self.reference:
            self.reference = self.generate_reference()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_reference() -> str:
        return secrets.token_hex(4).upper()

    def stay_dates(self) -> DateRange:
        return DateRange(self.check_in, self.check_out)

    def guest_count(self) -> GuestCount:
        return GuestCount(self.adults, self.children, self.infants)

    def total_money(self) -> Money:
        return Money(self.total_amount, self.currency)

    def is_blocking(self) -> bool:
        return self.status in self.BLOCKING_STATUSES

    def is_unpaid(self) -> bool:
        return self.status in self.UNPAID_STATUSES

    def should_expire(self) -> bool:
        return bool(self.is_unpaid() and self.expires_at and timezone.now() >= self.expires_at)
