"""Tests for the email-login user model and JWT token endpoint."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class UserModelTests(APITestCase):
    def test_create_user_normalises_contact_details(self) -> None:
        user = User.objects.create_user(
            email="Guest@EXAMPLE.com",
            phone="+234 800-000-0009",
            password="GuestPass123",
        )

        self.assertEqual(user.email, "Guest@example.com")
        self.assertEqual(user.phone, "+2348000000009")
        self.assertEqual(user.role, User.RoleChoices.GUEST)
        self.assertFalse(user.is_agent())
        self.assertFalse(user.is_platform_admin())

    def test_superuser_is_platform_admin(self) -> None:
        admin = User.objects.create_superuser(email="root@example.com", password="RootPass123")

        self.assertEqual(admin.role, User.RoleChoices.ADMIN)
        self.assertTrue(admin.is_platform_admin())

    def test_token_pair_is_issued_for_email_login(self) -> None:
        User.objects.create_user(email="agent@example.com", password="AgentPass123", role=User.RoleChoices.AGENT)

        response = self.client.post(
            reverse("token-obtain-pair"),
            {"email": "agent@example.com", "password": "AgentPass123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

    def test_wrong_password_is_rejected(self) -> None:
        User.objects.create_user(email="agent@example.com", password="AgentPass123")

        response = self.client.post(
            reverse("token-obtain-pair"),
            {"email": "agent@example.com", "password": "nope"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
