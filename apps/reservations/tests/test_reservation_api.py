"""Integration tests for reservation API endpoints."""

from __future__ import annotations

from datetime import timedelta
from unittest import mock

from django.db import IntegrityError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.properties.models import Property
from apps.reservations.domain.errors import DatesUnavailableError
from apps.reservations.models import Reservation
from apps.reservations.services import create_reservation
from apps.users.models import User
from shared.domain.value_objects import GuestCount


class ReservationAPITests(APITestCase):
    """Covers quoting, creation, conflicts and cancellation of reservations."""

    def setUp(self) -> None:
        self.guest = User.objects.create_user(
            email="guest@example.com",
            phone="+2348000000002",
            password="GuestPass123",
            role=User.RoleChoices.GUEST,
        )
        self.agent = User.objects.create_user(
            email="agent@example.com",
            phone="+2348000000003",
            password="AgentPass123",
            role=User.RoleChoices.AGENT,
        )
        self.property = Property.objects.create(
            owner=self.agent,
            title="Lekki Phase 1 apartment",
            city="Lagos",
            address_line="12 Admiralty Way",
            status=Property.Status.ACTIVE,
            price_amount=5000,
            deposit_amount=2000,
            service_charge_amount=1000,
            max_guests=4,
        )
        self.today = timezone.localdate()
        self.client.force_authenticate(self.guest)
        self.list_url = reverse("reservation-list")
        self.quote_url = reverse("reservation-quote")

    def _payload(self, check_in, check_out, **extra) -> dict:
        payload = {
            "property": self.property.id,
            "check_in": str(check_in),
            "check_out": str(check_out),
            "adults": 2,
        }
        payload.update(extra)
        return payload

    def test_quote_returns_breakdown_without_persisting(self) -> None:
        check_in = self.today + timedelta(days=1)

        response = self.client.post(
            self.quote_url, self._payload(check_in, check_in + timedelta(days=3)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["accommodation_amount"], 15000)
        self.assertEqual(response.data["platform_fee_amount"], 150)
        self.assertEqual(response.data["total_amount"], 18150)
        self.assertEqual(response.data["currency"], "NGN")
        self.assertEqual(len(response.data["line_items"]), 4)
        self.assertEqual(Reservation.objects.count(), 0)

    def test_quote_rejects_same_day_range(self) -> None:
        check_in = self.today + timedelta(days=1)

        response = self.client.post(self.quote_url, self._payload(check_in, check_in), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("at least one night", response.data["non_field_errors"][0])

    def test_guest_can_create_reservation(self) -> None:
        check_in = self.today + timedelta(days=1)
        check_out = check_in + timedelta(days=3)

        response = self.client.post(self.list_url, self._payload(check_in, check_out), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        reservation = Reservation.objects.get()
        self.assertEqual(reservation.guest, self.guest)
        self.assertEqual(reservation.status, Reservation.Status.PENDING)
        self.assertEqual(reservation.total_amount, 18150)
        self.assertEqual(reservation.nights, 3)
        self.assertIsNotNone(reservation.expires_at)
        self.assertEqual(response.data["reference"], reservation.reference)
        self.assertEqual(response.data["line_items"][0]["amount"], 15000)

    def test_prevent_double_booking_on_overlap(self) -> None:
        check_in = self.today + timedelta(days=1)
        first_payload = self._payload(check_in, check_in + timedelta(days=2))
        second_payload = self._payload(check_in + timedelta(days=1), check_in + timedelta(days=3))

        first_response = self.client.post(self.list_url, first_payload, format="json")
        self.assertEqual(first_response.status_code, status.HTTP_201_CREATED, first_response.data)

        conflict_response = self.client.post(self.list_url, second_payload, format="json")
        self.assertEqual(conflict_response.status_code, status.HTTP_400_BAD_REQUEST, conflict_response.data)
        self.assertIn("not available", conflict_response.data["non_field_errors"][0])
        self.assertEqual(Reservation.objects.count(), 1)

    def test_back_to_back_reservations_are_allowed(self) -> None:
        check_in = self.today + timedelta(days=1)
        first_payload = self._payload(check_in, check_in + timedelta(days=2))
        next_payload = self._payload(check_in + timedelta(days=2), check_in + timedelta(days=4))

        first_response = self.client.post(self.list_url, first_payload, format="json")
        self.assertEqual(first_response.status_code, status.HTTP_201_CREATED, first_response.data)

        second_response = self.client.post(self.list_url, next_payload, format="json")
        self.assertEqual(second_response.status_code, status.HTTP_201_CREATED, second_response.data)
        self.assertEqual(Reservation.objects.count(), 2)

    def test_cancelled_reservation_frees_dates(self) -> None:
        check_in = self.today + timedelta(days=5)
        check_out = check_in + timedelta(days=2)
        Reservation.objects.create(
            guest=self.guest,
            property=self.property,
            check_in=check_in,
            check_out=check_out,
            nights=2,
            currency="NGN",
            accommodation_amount=10000,
            total_amount=10000,
            status=Reservation.Status.CANCELLED,
        )

        response = self.client.post(self.list_url, self._payload(check_in, check_out), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_past_check_in_is_rejected(self) -> None:
        check_in = self.today - timedelta(days=1)

        response = self.client.post(
            self.list_url, self._payload(check_in, check_in + timedelta(days=2)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("past", response.data["non_field_errors"][0])

    def test_party_larger_than_capacity_is_rejected(self) -> None:
        check_in = self.today + timedelta(days=1)

        response = self.client.post(
            self.list_url,
            self._payload(check_in, check_in + timedelta(days=2), adults=3, children=2),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("at most 4 guests", response.data["non_field_errors"][0])

    def test_inactive_property_cannot_be_reserved(self) -> None:
        self.property.deactivate()
        check_in = self.today + timedelta(days=1)

        response = self.client.post(
            self.list_url, self._payload(check_in, check_in + timedelta(days=2)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

    def test_property_priced_in_other_currency_is_rejected(self) -> None:
        self.property.currency = Property.Currency.USD
        self.property.save(update_fields=["currency"])
        check_in = self.today + timedelta(days=1)

        response = self.client.post(
            self.list_url, self._payload(check_in, check_in + timedelta(days=2)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("USD", response.data["non_field_errors"][0])

    def test_guest_can_cancel_reservation(self) -> None:
        check_in = self.today + timedelta(days=3)
        response = self.client.post(
            self.list_url, self._payload(check_in, check_in + timedelta(days=2)), format="json"
        )
        reservation_id = response.data["id"]

        cancel_url = reverse("reservation-cancel", args=[reservation_id])
        cancel_response = self.client.post(cancel_url, {"reason": "Change of plans"}, format="json")

        self.assertEqual(cancel_response.status_code, status.HTTP_200_OK, cancel_response.data)
        reservation = Reservation.objects.get(pk=reservation_id)
        self.assertEqual(reservation.status, Reservation.Status.CANCELLED)
        self.assertEqual(reservation.cancellation_source, Reservation.CancellationSource.GUEST)
        self.assertEqual(reservation.cancellation_reason, "Change of plans")

        again = self.client.post(cancel_url, {}, format="json")
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)

    def test_guest_only_sees_own_reservations(self) -> None:
        other = User.objects.create_user(email="other@example.com", password="OtherPass123")
        check_in = self.today + timedelta(days=1)
        create_reservation(other, self.property, check_in, check_in + timedelta(days=1), GuestCount(1))

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 0)

    def test_agent_sees_reservations_for_own_listings(self) -> None:
        check_in = self.today + timedelta(days=1)
        create_reservation(self.guest, self.property, check_in, check_in + timedelta(days=1), GuestCount(1))
        self.client.force_authenticate(self.agent)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)

    def test_constraint_violation_maps_to_conflict(self) -> None:
        check_in = self.today + timedelta(days=1)
        error = IntegrityError('conflicting key value violates exclusion constraint "reservation_no_overlap"')

        with mock.patch.object(Reservation.objects, "create", side_effect=error):
            with self.assertRaises(DatesUnavailableError):
                create_reservation(
                    self.guest, self.property, check_in, check_in + timedelta(days=2), GuestCount(1)
                )

    def test_anonymous_user_cannot_reserve(self) -> None:
        self.client.force_authenticate(None)
        check_in = self.today + timedelta(days=1)

        response = self.client.post(
            self.list_url, self._payload(check_in, check_in + timedelta(days=2)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
