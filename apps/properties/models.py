"""Property domain models for PropToken.

A property is a listing that guests can reserve for short stays and
that may later be tokenized for fractional investment. It owns the
pricing config used by the reservation price calculation; every amount
is stored in integer minor units (kobo, cents).
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.reservations.domain.pricing import PricingConfig, PricingPeriod


class Property(models.Model):
    """Listing available for reservation."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        PENDING = "pending", _("Under review")
        ACTIVE = "active", _("Active")
        INACTIVE = "inactive", _("Inactive")

    class Currency(models.TextChoices):
        NGN = "NGN", _("Nigerian naira")
        USD = "USD", _("US dollar")
        EUR = "EUR", _("Euro")
        GBP = "GBP", _("Pound sterling")

    class PricePeriod(models.TextChoices):
        NIGHT = PricingPeriod.NIGHT.value, _("Per night")
        MONTH = PricingPeriod.MONTH.value, _("Per month")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    city = models.CharField(max_length=100)
    address_line = models.CharField(max_length=255, blank=True)
    bedrooms = models.PositiveSmallIntegerField(default=1)
    max_guests = models.PositiveSmallIntegerField(default=2)
    price_amount = models.PositiveBigIntegerField(
        help_text=_("Rate per price period in minor units (kobo, cents)."),
    )
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.NGN)
    deposit_amount = models.PositiveBigIntegerField(
        default=0,
        help_text=_("Refundable security deposit in minor units."),
    )
    service_charge_amount = models.PositiveBigIntegerField(
        default=0,
        help_text=_("Flat service charge per reservation in minor units."),
    )
    price_period = models.CharField(
        max_length=10,
        choices=PricePeriod.choices,
        default=PricePeriod.NIGHT,
    )
    published_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="property_status_idx"),
            models.Index(fields=["owner", "status"], name="property_owner_status_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def is_bookable(self) -> bool:
        return self.status == self.Status.ACTIVE

    def pricing_config(self) -> PricingConfig:
        return PricingConfig.build(
            self.price_amount,
            self.currency,
            deposit=self.deposit_amount,
            service_charge=self.service_charge_amount,
            period=self.price_period,
        )

    def activate(self) -> None:
        if self.status != self.Status.ACTIVE:
            self.status = self.Status.ACTIVE
            self.published_at = timezone.now()
            self.save(update_fields=["status", "published_at"])

    def deactivate(self) -> None:
        if self.status == self.Status.ACTIVE:
            self.status = self.Status.INACTIVE
            self.save(update_fields=["status"])

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            base_slug = slugify(self.title)[:200] or "property"
            candidate = base_slug
            counter = 1
            while self.__class__.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
                counter += 1
                candidate = f"{base_slug}-{counter}"
            self.slug = candidate
        super().save(*args, **kwargs)
