"""App configuration for the access_control Django application.

The app owns the request pipeline (tenancy, principal, resource loading,
permission engine and gates). It has no models of its own; loading it
registers the capability system check.
"""

from django.apps import AppConfig


class AccessControlConfig(AppConfig):
    """Application configuration for the access_control app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "access_control"

    def ready(self) -> None:
        """Register system checks when the app is loaded."""
        from . import checks  # noqa: F401
