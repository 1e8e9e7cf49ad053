"""App configuration for the core project utilities."""

import logging

from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    """Core app holds shared settings, URLs, middleware and the error envelope."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"

    def ready(self) -> None:
        """Fail at startup, not on the first request, when the service config is invalid."""
        from .config import ServiceConfig

        try:
            config = ServiceConfig.from_settings(settings)
        except ValueError as exc:
            raise ImproperlyConfigured(f"Invalid service configuration: {exc}") from exc
        logger.debug("Tenant header %s, membership required: %s", config.tenant_header, config.require_tenant_membership)
