"""Shared helpers for tests (fake Redis, users, organizations, API clients)."""

from __future__ import annotations

from typing import Dict, Optional
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from authentication.managers import UserManager
from authentication.services import TokenService
from organizations.models import Organization

User = get_user_model()


class FakeRedis:
    """Minimal Redis stub supporting the commands used by TokenService."""

    def __init__(self):
        self._store: Dict[str, str] = {}

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)


class RedisPatchedTestCase(TestCase):
    """TestCase whose token blocklist lives in an in-memory ``FakeRedis``."""

    @classmethod
    def setUpClass(cls):
        """Patch Redis clients to use the in-memory fake for all tests."""
        super().setUpClass()
        cls.fake_redis = FakeRedis()
        cls.patchers = [
            mock.patch("core.redis_client.get_redis_client", return_value=cls.fake_redis),
            mock.patch("authentication.services.get_redis_client", return_value=cls.fake_redis),
        ]
        for patcher in cls.patchers:
            patcher.start()

    @classmethod
    def tearDownClass(cls):
        """Stop Redis patches after all tests complete."""
        for patcher in cls.patchers:
            patcher.stop()
        super().tearDownClass()


def create_user(email: str, password: str = "StrongPass123", role: str = "member", **extra):
    """Create a user with a bcrypt-hashed password for tests."""

    extra.setdefault("name", email.split("@", 1)[0].capitalize())
    return User.objects.create(
        email=email,
        password_hash=UserManager.hash_password(password),
        role=role,
        **extra,
    )


def create_org(name: str, *members) -> Organization:
    organization = Organization.objects.create(name=name)
    if members:
        organization.members.add(*members)
    return organization


def access_token(user) -> str:
    token, _ = TokenService.from_settings().generate_tokens(user)
    return token


def auth_client(user=None, organization: Optional[Organization] = None) -> APIClient:
    """Return an APIClient carrying a fresh access token and/or a tenant header."""

    client = APIClient()
    credentials = {}
    if user is not None:
        credentials["HTTP_AUTHORIZATION"] = f"Bearer {access_token(user)}"
    if organization is not None:
        credentials["HTTP_X_ORGANIZATION_ID"] = str(organization.pk)
    client.credentials(**credentials)
    return client
