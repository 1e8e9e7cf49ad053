"""Organization model: the tenant boundary for articles."""

from django.conf import settings
from django.db import models


class Organization(models.Model):
    """A tenant. Owns its articles exclusively and shares users via membership."""

    name = models.CharField(max_length=255, unique=True)
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="organizations",
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name

    def has_member(self, user_id: int) -> bool:
        """Return True if the user with ``user_id`` belongs to this organization."""
        return self.members.filter(pk=user_id).exists()


__all__ = ["Organization"]
