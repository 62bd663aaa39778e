"""
Paystack payment gateway integration

Amounts travel to and from Paystack in the lowest currency unit (kobo for
NGN), which is exactly how every amount is stored here, so no scaling
happens in either direction.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings  # type: ignore

from .domain.errors import InvalidSignatureError, PaymentProviderError

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "HTTP_X_PAYSTACK_SIGNATURE"


def _secret_key() -> str:
    secret = getattr(settings, "PAYSTACK_SECRET_KEY", "")
    if not secret:
        raise PaymentProviderError("Paystack secret key not configured")
    return secret


def _base_url() -> str:
    return getattr(settings, "PAYSTACK_BASE_URL", "https://api.paystack.co").rstrip("/")


def _timeout() -> int:
    return getattr(settings, "PAYSTACK_TIMEOUT", 30)


def _headers() -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {_secret_key()}",
        "Content-Type": "application/json",
    }


def _unwrap(response: requests.Response) -> Dict[str, Any]:
    """Return ``data`` from a Paystack envelope or raise PaymentProviderError."""
    try:
        body = response.json()
    except ValueError as exc:
        raise PaymentProviderError("Paystack returned a non-JSON response") from exc

    if not response.ok or not body.get("status"):
        message = body.get("message") or f"HTTP {response.status_code}"
        raise PaymentProviderError(f"Paystack error: {message}")
    return body.get("data") or {}


def initialize_transaction(
    *,
    email: str,
    amount: int,
    currency: str,
    reference: str,
    callback_url: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Start a hosted checkout

    Args:
        email: Customer email shown on the checkout page
        amount: Amount in minor units
        currency: ISO currency code
        reference: Our unique payment reference
        callback_url: Where Paystack redirects after checkout
        metadata: Extra data echoed back in verify and webhook payloads

    Returns:
        dict: ``authorization_url``, ``access_code`` and ``reference``
    """
    payload: Dict[str, Any] = {
        "email": email,
        "amount": amount,
        "currency": currency,
        "reference": reference,
        "metadata": metadata or {},
    }
    if callback_url:
        payload["callback_url"] = callback_url

    logger.info(f"Initializing Paystack transaction {reference} for {amount} {currency}")
    try:
        response = requests.post(
            f"{_base_url()}/transaction/initialize",
            json=payload,
            headers=_headers(),
            timeout=_timeout(),
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"Paystack initialize request failed for {reference}: {e}", exc_info=True)
        raise PaymentProviderError(f"Failed to reach Paystack: {e}") from e

    return _unwrap(response)


def verify_transaction(reference: str) -> Dict[str, Any]:
    """Fetch the transaction Paystack recorded for ``reference``."""
    try:
        response = requests.get(
            f"{_base_url()}/transaction/verify/{reference}",
            headers=_headers(),
            timeout=_timeout(),
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"Paystack verify request failed for {reference}: {e}", exc_info=True)
        raise PaymentProviderError(f"Failed to reach Paystack: {e}") from e

    return _unwrap(response)


def compute_signature(body: bytes) -> str:
    """HMAC-SHA512 of the raw webhook body keyed with the secret key."""
    return hmac.new(_secret_key().encode("utf-8"), body, hashlib.sha512).hexdigest()


def verify_webhook_signature(body: bytes, signature: Optional[str]) -> None:
    if not signature:
        raise InvalidSignatureError("No Paystack signature found")
    if not hmac.compare_digest(compute_signature(body), signature):
        raise InvalidSignatureError()
