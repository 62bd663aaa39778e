"""Payments app package.

Collects reservation payments through Paystack: hosted checkout
initialization, verification by reference and signed webhooks. A paid
reservation is confirmed through ``apps.reservations.services``.
"""
