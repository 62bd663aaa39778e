"""Payment models for PropToken."""

from __future__ import annotations

import secrets
from datetime import timedelta

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import Money


class Payment(models.Model):
    """One checkout attempt for a reservation."""

    class Provider(models.TextChoices):
        PAYSTACK = "paystack", _("Paystack")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        SUCCESS = "success", _("Successful")
        FAILED = "failed", _("Failed")
        ABANDONED = "abandoned", _("Abandoned")

    reservation = models.ForeignKey(
        "reservations.Reservation",
        on_delete=models.CASCADE,
        related_name="payments",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="payments",
    )
    reference = models.CharField(max_length=40, unique=True, editable=False)
    provider = models.CharField(max_length=20, choices=Provider.choices, default=Provider.PAYSTACK)
    amount = models.PositiveBigIntegerField(help_text=_("Charged amount in minor units."))
    currency = models.CharField(max_length=3)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    authorization_url = models.URLField(max_length=500, blank=True)
    access_code = models.CharField(max_length=100, blank=True)
    provider_payload = models.JSONField(default=dict, blank=True)
    failure_reason = models.CharField(max_length=255, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["reservation", "status"], name="payment_reservation_idx"),
        ]

    def __str__(self) -> str:
        return f"Payment {self.reference} ({self.status})"

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and not self.reference:
            self.reference = self.generate_reference(self.reservation.reference)
        super().save(*args, **kwargs)

    @staticmethod
    def generate_reference(reservation_reference: str) -> str:
        return f"PT-{reservation_reference}-{secrets.token_hex(3).upper()}"

    @property
    def money(self) -> Money:
        return Money(self.amount, self.currency)

    @property
    def is_open(self) -> bool:
        return self.status == self.Status.PENDING and bool(self.authorization_url)

    def is_stale_start(self, now=None) -> bool:
        """True for a pending checkout whose Paystack call cannot still be in flight."""
        now = now or timezone.now()
        grace = timedelta(seconds=2 * getattr(settings, "PAYSTACK_TIMEOUT", 30))
        return not self.authorization_url and self.created_at + grace < now
