"""DRF permission classes enforcing capability gates on loaded articles."""

from rest_framework import permissions

from .exceptions import Forbidden
from .policy import ROLE_ADMIN


class IsPrincipal(permissions.BasePermission):
    """Require an authenticated principal; DRF turns a denial into 401."""

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        return bool(user and getattr(user, "is_authenticated", False))


class HasArticleCapability(permissions.BasePermission):
    """Check the capability a view action declares against the bound permission.

    Views list the capability each detail action needs in
    ``capability_by_action``; the object handed to ``check_object_permissions``
    is an ``ArticleContext`` or ``CommentContext`` carrying the permission
    level computed by the policy engine. Actions without a declared capability
    are denied.
    """

    def has_permission(self, request, view) -> bool:
        return True

    def has_object_permission(self, request, view, obj) -> bool:
        capability = getattr(view, "capability_by_action", {}).get(view.action)
        if capability is None or not capability.allows(obj.permission):
            verb = capability.value if capability is not None else view.action
            raise Forbidden(
                f"Your permission on this article ({obj.permission.label}) does not allow '{verb}'."
            )
        return True


class IsTenantAdmin(permissions.BasePermission):
    """Allow reads to any principal; writes only to users with the ``admin`` role."""

    def has_permission(self, request, view) -> bool:
        if request.method in permissions.SAFE_METHODS:
            return True
        if getattr(request.user, "role", None) != ROLE_ADMIN:
            raise Forbidden("Only administrators can modify the organization.")
        return True


__all__ = ["HasArticleCapability", "IsPrincipal", "IsTenantAdmin"]
