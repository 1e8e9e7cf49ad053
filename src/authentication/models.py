"""Custom User model with bcrypt-hashed passwords and a single role string.

Note: Django's groups/permissions (PermissionsMixin) are deliberately absent;
what a user may do to an article is derived by ``access_control.policy`` from
authorship and ``role`` alone.
"""

from typing import ClassVar, Optional

from django.contrib.auth.models import AbstractBaseUser
from django.db import models

from .managers import DEFAULT_ROLE, UserManager


class User(AbstractBaseUser):
    """User identified by email; ``role`` is an open string, ``member`` by default."""

    name = models.CharField(max_length=150)
    email = models.EmailField(unique=True)
    password_hash = models.CharField(max_length=128)
    role = models.CharField(max_length=50, default=DEFAULT_ROLE)
    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: ClassVar[list[str]] = ["name"]

    objects = UserManager()

    class Meta:
        """Default ordering shows newest users first."""
        ordering = ["-date_joined"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.email

    def set_password(self, raw_password: Optional[str]) -> None:  # type: ignore[override]
        """Override to ensure bcrypt hashing via manager utility."""

        if raw_password is None:
            self.password_hash = ""
        else:
            self.password_hash = UserManager.hash_password(raw_password)

    def check_password(self, raw_password: Optional[str]) -> bool:  # type: ignore[override]
        """Delegate to bcrypt verification helper."""

        if raw_password is None:
            return False
        return UserManager.check_password_hash(self.password_hash, raw_password)


__all__ = ["User"]
