"""Payment domain errors."""

from shared.domain.base import DomainError


class PaymentError(DomainError):
    """Base class for payment failures."""

    default_message = "Payment could not be processed"


class PaymentProviderError(PaymentError):
    """Raised when the provider is unreachable or rejects the request."""

    default_message = "Payment provider is unavailable"


class PaymentVerificationError(PaymentError):
    """Raised when a transaction does not match the payment we created."""

    default_message = "Payment verification failed"


class InvalidSignatureError(PaymentError):
    """Raised for webhooks whose signature does not match the body."""

    default_message = "Invalid webhook signature"
