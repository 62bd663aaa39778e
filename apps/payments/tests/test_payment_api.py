"""Integration tests for reservation checkout through Paystack."""

from __future__ import annotations

import hashlib
import hmac
import json
from datetime import timedelta
from unittest import mock

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.payments.domain.errors import PaymentError
from apps.payments.models import Payment
from apps.payments.services import initialize_reservation_payment
from apps.properties.models import Property
from apps.reservations.models import Reservation
from apps.reservations.services import create_reservation
from apps.users.models import User
from shared.domain.value_objects import GuestCount


def _response(body, ok=True, status_code=200):
    response = mock.Mock(ok=ok, status_code=status_code)
    response.json.return_value = body
    return response


def _checkout(reference="PT-REF"):
    return _response(
        {
            "status": True,
            "message": "Authorization URL created",
            "data": {
                "authorization_url": "https://checkout.paystack.com/xyz",
                "access_code": "xyz",
                "reference": reference,
            },
        }
    )


class PaymentAPITests(APITestCase):
    def setUp(self) -> None:
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        agent = User.objects.create_user(
            email="agent@example.com", password="AgentPass123", role=User.RoleChoices.AGENT
        )
        self.property = Property.objects.create(
            owner=agent,
            title="Lekki terrace",
            city="Lagos",
            status=Property.Status.ACTIVE,
            price_amount=5000,
            deposit_amount=2000,
            service_charge_amount=1000,
            max_guests=4,
        )
        check_in = timezone.localdate() + timedelta(days=1)
        self.reservation = create_reservation(
            self.guest, self.property, check_in, check_in + timedelta(days=3), GuestCount(2)
        )
        self.client.force_authenticate(self.guest)

    def _initialize(self):
        with mock.patch("apps.payments.paystack.requests.post", return_value=_checkout()) as post:
            response = self.client.post(
                reverse("payment-initialize"), {"reservation": self.reservation.id}, format="json"
            )
        return response, post

    def _verify_with(self, transaction: dict):
        payment = Payment.objects.get()
        body = {"status": True, "message": "Verification successful", "data": transaction}
        with mock.patch("apps.payments.paystack.requests.get", return_value=_response(body)):
            return self.client.post(reverse("payment-verify"), {"reference": payment.reference}, format="json")

    def test_initialize_returns_checkout_url(self) -> None:
        response, post = self._initialize()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["authorization_url"], "https://checkout.paystack.com/xyz")
        self.assertEqual(response.data["amount"], 18150)
        payload = post.call_args.kwargs["json"]
        self.assertEqual(payload["amount"], 18150)
        self.assertEqual(payload["reference"], response.data["reference"])
        self.assertEqual(payload["metadata"]["reservation_reference"], self.reservation.reference)
        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.status, Reservation.Status.AWAITING_PAYMENT)

    def test_initialize_twice_reuses_open_payment(self) -> None:
        first, _ = self._initialize()
        second, post = self._initialize()

        self.assertEqual(second.status_code, status.HTTP_201_CREATED, second.data)
        self.assertEqual(first.data["reference"], second.data["reference"])
        post.assert_not_called()
        self.assertEqual(Payment.objects.count(), 1)

    def test_retry_during_provider_call_does_not_open_second_checkout(self) -> None:
        references = []

        def provider_answers_after_retry(**kwargs):
            references.append(kwargs["reference"])
            with self.assertRaises(PaymentError):
                initialize_reservation_payment(self.reservation, self.guest)
            return {
                "authorization_url": "https://checkout.paystack.com/xyz",
                "access_code": "xyz",
                "reference": kwargs["reference"],
            }

        with mock.patch(
            "apps.payments.services.paystack.initialize_transaction",
            side_effect=provider_answers_after_retry,
        ):
            payment = initialize_reservation_payment(self.reservation, self.guest)

        self.assertEqual(references, [payment.reference])
        self.assertEqual(Payment.objects.count(), 1)
        self.assertTrue(payment.is_open)

    def test_retry_while_checkout_is_starting_is_rejected(self) -> None:
        Payment.objects.create(
            reservation=self.reservation, user=self.guest, amount=18150, currency="NGN"
        )

        response, post = self._initialize()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("already being started", response.data["non_field_errors"][0])
        post.assert_not_called()
        self.assertEqual(Payment.objects.count(), 1)

    def test_stuck_checkout_start_is_abandoned_and_replaced(self) -> None:
        stuck = Payment.objects.create(
            reservation=self.reservation, user=self.guest, amount=18150, currency="NGN"
        )
        Payment.objects.filter(pk=stuck.pk).update(created_at=timezone.now() - timedelta(minutes=10))

        response, post = self._initialize()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertNotEqual(response.data["reference"], stuck.reference)
        post.assert_called_once()
        stuck.refresh_from_db()
        self.assertEqual(stuck.status, Payment.Status.ABANDONED)

    def test_other_user_cannot_pay_reservation(self) -> None:
        stranger = User.objects.create_user(email="stranger@example.com", password="StrangerPass123")
        self.client.force_authenticate(stranger)

        response, post = self._initialize()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        post.assert_not_called()

    def test_provider_failure_returns_bad_gateway(self) -> None:
        with mock.patch(
            "apps.payments.paystack.requests.post",
            return_value=_response({"status": False, "message": "Currency not supported"}, ok=False, status_code=400),
        ):
            response = self.client.post(
                reverse("payment-initialize"), {"reservation": self.reservation.id}, format="json"
            )

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertIn("Currency not supported", response.data["detail"])
        self.assertEqual(Payment.objects.get().status, Payment.Status.FAILED)

    def test_verify_success_confirms_reservation(self) -> None:
        self._initialize()

        response = self._verify_with({"status": "success", "amount": 18150, "currency": "NGN"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Payment.Status.SUCCESS)
        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.status, Reservation.Status.CONFIRMED)
        self.assertEqual(self.reservation.payment_status, Reservation.PaymentStatus.PAID)
        self.assertIsNotNone(self.reservation.confirmed_at)

    def test_verify_rejects_amount_mismatch(self) -> None:
        self._initialize()

        response = self._verify_with({"status": "success", "amount": 100, "currency": "NGN"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(Payment.objects.get().status, Payment.Status.FAILED)
        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.status, Reservation.Status.AWAITING_PAYMENT)

    def test_verify_abandoned_checkout(self) -> None:
        self._initialize()

        response = self._verify_with({"status": "abandoned", "amount": 18150, "currency": "NGN"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Payment.Status.ABANDONED)

    def test_verify_unknown_reference(self) -> None:
        response = self.client.post(reverse("payment-verify"), {"reference": "PT-NOPE"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("not found", response.data["non_field_errors"][0])


class PaystackWebhookTests(APITestCase):
    def setUp(self) -> None:
        guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        agent = User.objects.create_user(
            email="agent@example.com", password="AgentPass123", role=User.RoleChoices.AGENT
        )
        listing = Property.objects.create(
            owner=agent, title="Ikoyi flat", city="Lagos", status=Property.Status.ACTIVE, price_amount=10000
        )
        check_in = timezone.localdate() + timedelta(days=2)
        self.reservation = create_reservation(guest, listing, check_in, check_in + timedelta(days=1), GuestCount(1))
        self.payment = Payment.objects.create(
            reservation=self.reservation,
            user=guest,
            amount=self.reservation.total_amount,
            currency="NGN",
            authorization_url="https://checkout.paystack.com/hook",
        )
        self.url = reverse("payment-webhook")

    def _post(self, payload: dict, signature: str | None = None):
        body = json.dumps(payload).encode("utf-8")
        if signature is None:
            signature = hmac.new(b"sk_test_secret", body, hashlib.sha512).hexdigest()
        return self.client.generic(
            "POST",
            self.url,
            body,
            content_type="application/json",
            HTTP_X_PAYSTACK_SIGNATURE=signature,
        )

    def test_charge_success_confirms_reservation(self) -> None:
        response = self._post(
            {
                "event": "charge.success",
                "data": {
                    "reference": self.payment.reference,
                    "status": "success",
                    "amount": self.payment.amount,
                    "currency": "NGN",
                },
            }
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"success": True, "event": "charge.success"})
        self.payment.refresh_from_db()
        self.reservation.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.SUCCESS)
        self.assertEqual(self.reservation.status, Reservation.Status.CONFIRMED)

    def test_invalid_signature_is_rejected(self) -> None:
        response = self._post(
            {"event": "charge.success", "data": {"reference": self.payment.reference}},
            signature="forged",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.PENDING)

    def test_unknown_events_are_acknowledged(self) -> None:
        response = self._post({"event": "transfer.success", "data": {"reference": "TRF-1"}})

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_charge_failed_marks_payment_failed(self) -> None:
        response = self._post(
            {
                "event": "charge.failed",
                "data": {"reference": self.payment.reference, "gateway_response": "Declined"},
            }
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.FAILED)
        self.assertEqual(self.payment.failure_reason, "Declined")
