"""Middleware that resolves the request principal from a bearer access token."""

import logging

from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.db import DatabaseError
from django.utils.deprecation import MiddlewareMixin

from access_control.exceptions import AccessError, Unauthenticated
from access_control.resolvers import resolve_principal
from authentication.services import BlocklistUnavailable, TokenService
from core.config import ServiceConfig

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(MiddlewareMixin):
    """Decode the access JWT, check the blocklist, and attach ``request.user``.

    Requests without an ``Authorization`` header continue anonymously; views
    decide whether that is acceptable. When a header is present but cannot be
    resolved, the request also continues anonymously with the failure stored
    on ``request.auth_error``. ``MiddlewareUserAuthentication`` raises it once
    the view has resolved the tenant, so a missing tenant header is reported
    before a bad token.
    """

    def __init__(self, get_response):
        super().__init__(get_response)
        self.token_service = TokenService(ServiceConfig.from_settings(settings))

    def process_request(self, request):  # type: ignore[override]
        """Authenticate request using Bearer access token if present."""
        request.user = AnonymousUser()
        request.auth_error = None

        auth_header = request.META.get("HTTP_AUTHORIZATION", "")
        if not auth_header:
            return None

        scheme, _, token = auth_header.partition(" ")
        try:
            if scheme != "Bearer":
                raise Unauthenticated("Authorization header must use the Bearer scheme")
            principal = resolve_principal(token.strip(), self.token_service)
        except (AccessError, BlocklistUnavailable, DatabaseError) as exc:
            logger.debug("Deferring %s for %s", type(exc).__name__, request.path)
            request.auth_error = exc
            return None

        request.user = principal.user
        return None


__all__ = ["JWTAuthMiddleware"]
