"""Authentication helpers that bridge JWT middleware into DRF.

DRF's ``Request.user`` normally relies on its own authentication classes.
Since this project resolves the principal in ``JWTAuthMiddleware``, this
module provides a lightweight authenticator that simply surfaces the user
already attached to the underlying Django request.
"""

from typing import Any, Optional, Tuple

from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Expose ``request._request.user`` (set by middleware) to DRF.

    This authenticator does *not* perform any credential parsing or token
    decoding. A failure the middleware recorded in ``auth_error`` is raised
    here, so it goes through the DRF exception handler. Anonymous or missing
    users skip authentication, which DRF then reports as ``NotAuthenticated``
    on views that require a principal.
    """

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        # DRF's Request wraps the original Django HttpRequest as ``._request``.
        django_request = getattr(request, "_request", None)
        if django_request is None:
            return None

        auth_error = getattr(django_request, "auth_error", None)
        if auth_error is not None:
            raise auth_error

        user = getattr(django_request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return None

        return user, None

    def authenticate_header(self, request) -> str:
        return 'Bearer realm="api"'


__all__ = ["MiddlewareUserAuthentication"]
