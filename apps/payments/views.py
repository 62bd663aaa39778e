"""API views for reservation payments."""

from __future__ import annotations

import json
import logging

from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from . import paystack
from .domain.errors import (
    InvalidSignatureError,
    PaymentError,
    PaymentProviderError,
    PaymentVerificationError,
)
from .serializers import PaymentInitializeSerializer, PaymentSerializer, PaymentVerifySerializer
from .services import handle_webhook_event, initialize_reservation_payment, verify_payment

logger = logging.getLogger(__name__)


def _error_response(exc: PaymentError) -> Response:
    if isinstance(exc, PaymentProviderError):
        return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
    return Response({"non_field_errors": [str(exc)]}, status=status.HTTP_400_BAD_REQUEST)


class PaymentInitializeView(APIView):
    """Returns a hosted checkout URL for one of the caller's reservations."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = PaymentInitializeSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        try:
            payment = initialize_reservation_payment(serializer.validated_data["reservation"], request.user)
        except PaymentError as exc:
            return _error_response(exc)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class PaymentVerifyView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = PaymentVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            payment = verify_payment(serializer.validated_data["reference"], user=request.user)
        except PaymentError as exc:
            return _error_response(exc)
        return Response(PaymentSerializer(payment).data)


class PaystackWebhookView(APIView):
    """
    Paystack event receiver

    The signature covers the raw body, so it is checked before the JSON
    is parsed. Paystack retries on non-2xx, hence 200 for ignored events.
    """

    authentication_classes: list = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        body = request.body
        try:
            paystack.verify_webhook_signature(body, request.META.get(paystack.SIGNATURE_HEADER))
        except InvalidSignatureError as exc:
            logger.warning(f"Rejected Paystack webhook: {exc}")
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentProviderError as exc:
            logger.error(f"Cannot check Paystack webhook signature: {exc}")
            return _error_response(exc)

        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return Response({"detail": "Invalid JSON"}, status=status.HTTP_400_BAD_REQUEST)

        event = payload.get("event", "")
        try:
            handle_webhook_event(event, payload.get("data") or {})
        except PaymentVerificationError as exc:
            logger.error(f"Paystack webhook {event} failed verification: {exc}")
        return Response({"success": True, "event": event})
