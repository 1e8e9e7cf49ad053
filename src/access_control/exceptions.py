"""Error taxonomy raised by the tenancy/principal/resource/permission pipeline.

Every kind is a DRF ``APIException`` so that views can simply raise and let
``core.exceptions.custom_exception_handler`` render the envelope. The
``default_code`` is surfaced to callers as the machine-readable ``code``.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class AccessError(APIException):
    """Base class for pipeline failures; each subclass fixes status and code."""


class MissingTenant(AccessError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Organization ID header required."
    default_code = "missing_tenant"


class InvalidTenant(AccessError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid organization ID format."
    default_code = "invalid_tenant"


class TenantNotFound(AccessError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Organization not found."
    default_code = "tenant_not_found"


class Unauthenticated(AccessError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication credentials were not provided or are invalid."
    default_code = "unauthenticated"


class PrincipalNotFound(AccessError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "The user this token was issued for no longer exists."
    default_code = "principal_not_found"


class InvalidResourceID(AccessError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid resource ID format."
    default_code = "invalid_resource_id"


class ResourceNotFound(AccessError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "resource_not_found"


class TenantMismatch(AccessError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied: resource not in your organization."
    default_code = "tenant_mismatch"


class NotTenantMember(AccessError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not a member of this organization."
    default_code = "not_tenant_member"


class Forbidden(AccessError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action on this resource."
    default_code = "forbidden"


class StoreError(AccessError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable."
    default_code = "store_error"


__all__ = [
    "AccessError",
    "MissingTenant",
    "InvalidTenant",
    "TenantNotFound",
    "Unauthenticated",
    "PrincipalNotFound",
    "InvalidResourceID",
    "ResourceNotFound",
    "TenantMismatch",
    "NotTenantMember",
    "Forbidden",
    "StoreError",
]
