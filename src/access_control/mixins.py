"""View mixin that runs the tenancy and principal stages before a handler."""

import logging

from django.conf import settings

from core.config import ServiceConfig

from .context import Principal, RequestContext
from .exceptions import NotTenantMember
from .resolvers import resolve_tenant

logger = logging.getLogger(__name__)


class TenantScopedMixin:
    """Resolve the tenant header, then authenticate, then bind a ``RequestContext``.

    Actions named in ``tenant_agnostic_actions`` skip tenant resolution and
    get a context without a tenant. ``request_context`` is ``None`` for
    anonymous callers; permission classes reject those before any handler runs.
    """

    tenant_agnostic_actions: tuple[str, ...] = ("metadata",)

    tenant = None
    request_context = None

    def get_service_config(self) -> ServiceConfig:
        return ServiceConfig.from_settings(settings)

    def requires_tenant(self) -> bool:
        # plain APIViews have no action and are always tenant-scoped
        if not hasattr(self, "action"):
            return True
        return self.action is not None and self.action not in self.tenant_agnostic_actions

    def initial(self, request, *args, **kwargs):  # type: ignore[override]
        config = self.get_service_config()
        if self.requires_tenant():
            header = request.headers.get(config.tenant_header)
            self.tenant = resolve_tenant(header)

        super().initial(request, *args, **kwargs)  # type: ignore[misc]

        user = getattr(request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return

        principal = Principal.from_user(user)
        if (
            self.tenant is not None
            and config.require_tenant_membership
            and not self.tenant.has_member(principal.user_id)
        ):
            logger.info("User %s is not a member of organization %s", principal.user_id, self.tenant.pk)
            raise NotTenantMember()
        self.request_context = RequestContext(tenant=self.tenant, principal=principal)


__all__ = ["TenantScopedMixin"]
