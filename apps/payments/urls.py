"""URL routing for the payments domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import PaymentInitializeView, PaymentVerifyView, PaystackWebhookView

urlpatterns = [
    path("initialize/", PaymentInitializeView.as_view(), name="payment-initialize"),
    path("verify/", PaymentVerifyView.as_view(), name="payment-verify"),
    path("webhook/", PaystackWebhookView.as_view(), name="payment-webhook"),
]
