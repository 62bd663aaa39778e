"""Tests for the property catalogue and booked-dates calendar."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.properties.models import Property
from apps.reservations.models import Reservation
from apps.users.models import User


class PropertyAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="agent@example.com",
            phone="+2348000000001",
            password="StrongPass123",
            role=User.RoleChoices.AGENT,
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.property = Property.objects.create(
            owner=self.owner,
            title="Victoria Island studio",
            description="Ocean view",
            city="Lagos",
            address_line="5 Ahmadu Bello Way",
            bedrooms=1,
            max_guests=2,
            price_amount=4500000,
            status=Property.Status.ACTIVE,
        )
        self.draft = Property.objects.create(
            owner=self.owner,
            title="Abuja duplex",
            city="Abuja",
            price_amount=9000000,
            max_guests=6,
        )
        self.today = timezone.localdate()

    def _reserve(self, offset: int, nights: int, status_value=Reservation.Status.CONFIRMED) -> Reservation:
        check_in = self.today + timedelta(days=offset)
        return Reservation.objects.create(
            guest=self.guest,
            property=self.property,
            check_in=check_in,
            check_out=check_in + timedelta(days=nights),
            nights=nights,
            currency="NGN",
            accommodation_amount=4500000 * nights,
            total_amount=4500000 * nights,
            status=status_value,
        )

    def test_list_shows_only_active_properties_to_anonymous_users(self) -> None:
        response = self.client.get(reverse("property-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["title"], "Victoria Island studio")
        self.assertEqual(response.data["results"][0]["slug"], "victoria-island-studio")

    def test_filter_by_city_and_guests(self) -> None:
        self.draft.activate()

        response = self.client.get(reverse("property-list"), {"city": "abuja", "guests": 4})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([row["title"] for row in response.data["results"]], ["Abuja duplex"])

    def test_property_detail(self) -> None:
        response = self.client.get(reverse("property-detail", args=[self.property.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["price_amount"], 4500000)
        self.assertEqual(response.data["price_period"], "night")

    def test_agent_can_create_and_publish_property(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            reverse("property-list"),
            {"title": "Ikeja flat", "city": "Lagos", "price_amount": 3000000, "max_guests": 3},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], Property.Status.DRAFT)

        publish = self.client.post(reverse("property-publish", args=[response.data["id"]]))
        self.assertEqual(publish.status_code, status.HTTP_200_OK, publish.data)
        self.assertEqual(publish.data["status"], Property.Status.ACTIVE)

    def test_guest_cannot_create_property(self) -> None:
        self.client.force_authenticate(self.guest)

        response = self.client.post(
            reverse("property-list"),
            {"title": "Not mine", "city": "Lagos", "price_amount": 100},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_booked_dates_lists_blocking_reservations_only(self) -> None:
        booked = self._reserve(offset=2, nights=2)
        self._reserve(offset=10, nights=3, status_value=Reservation.Status.CANCELLED)

        response = self.client.get(reverse("property-booked-dates", args=[self.property.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data["booked_ranges"],
            [{"check_in": str(booked.check_in), "check_out": str(booked.check_out)}],
        )
        self.assertEqual(
            response.data["disabled_dates"],
            [str(booked.check_in), str(booked.check_in + timedelta(days=1))],
        )
        self.assertEqual(response.data["today"], str(self.today))

    def test_booked_dates_reflect_new_reservations_immediately(self) -> None:
        url = reverse("property-booked-dates", args=[self.property.id])
        self.assertEqual(self.client.get(url).data["booked_ranges"], [])

        self._reserve(offset=1, nights=1, status_value=Reservation.Status.PENDING)

        self.assertEqual(len(self.client.get(url).data["booked_ranges"]), 1)
