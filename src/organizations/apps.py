"""App configuration for organizations (tenants)."""

from django.apps import AppConfig


class OrganizationsConfig(AppConfig):
    """Organizations app holds the tenant model and its endpoints."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "organizations"
