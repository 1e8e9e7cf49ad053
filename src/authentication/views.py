"""Authentication endpoints: register, login, refresh, logout, profile, and join."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.response import Response

from access_control.exceptions import PrincipalNotFound, ResourceNotFound, Unauthenticated
from access_control.permissions import IsPrincipal
from access_control.resolvers import get_by_id, parse_numeric_id
from core.response import BaseAPIView, api_response
from organizations.models import Organization
from .serializers import (
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserDetailSerializer,
)
from .services import TokenService

User = get_user_model()
logger = logging.getLogger(__name__)


def _token_payload(user, token_service: TokenService) -> dict[str, Any]:
    access, refresh = token_service.generate_tokens(user)
    return {"user": UserDetailSerializer(user).data, "access": access, "refresh": refresh}


class RegisterView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Register a new user and return their profile with a token pair."""
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user %s with role %s", user.pk, user.role)
        return api_response(_token_payload(user, TokenService.from_settings()), status=status.HTTP_201_CREATED)


class LoginView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Authenticate and issue access + refresh tokens."""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        return api_response(_token_payload(user, TokenService.from_settings()))


class RefreshView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Exchange a valid refresh token for new access/refresh tokens."""
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            raise Unauthenticated("Refresh token required")

        token_service = TokenService.from_settings()
        payload = token_service.decode_token(refresh_token, expected_type="refresh")
        if token_service.is_token_blocked(payload["jti"]):
            raise Unauthenticated("Refresh token has been revoked")

        user = _get_user(payload.get("sub"))
        if user is None:
            raise PrincipalNotFound()

        # Refresh tokens are single use.
        token_service.block_token(payload["jti"], payload["exp"])
        return api_response(_token_payload(user, token_service))


class LogoutView(BaseAPIView):
    """Invalidate the current access token by blocklisting its jti."""

    permission_classes = [IsPrincipal]

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Blocklist the bearer access token and return 204 No Content."""
        token_service = TokenService.from_settings()
        payload = token_service.decode_token(_get_bearer_token(request) or "", expected_type="access")
        token_service.block_token(payload["jti"], payload["exp"])
        # 204 responses must not include a body.
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(BaseAPIView):
    permission_classes = [IsPrincipal]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Return the current user's profile."""
        return api_response(UserDetailSerializer(request.user).data)

    # noinspection PyMethodMayBeStatic
    def patch(self, request):
        """Update profile fields for the current user."""
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(UserDetailSerializer(request.user).data)


class JoinOrganizationView(BaseAPIView):
    """Add the current user to an organization's members."""

    permission_classes = [IsPrincipal]

    # noinspection PyMethodMayBeStatic
    def post(self, request, organization_id):
        try:
            organization = get_by_id(Organization.objects, parse_numeric_id(organization_id))
        except Organization.DoesNotExist:
            raise ResourceNotFound("Organization not found.") from None
        organization.members.add(request.user)
        logger.info("User %s joined organization %s", request.user.pk, organization.pk)
        return api_response(UserDetailSerializer(request.user).data)


def _get_user(user_id) -> User | None:
    """Retrieve a user by id, or None if the id is missing or unknown."""
    if not user_id:
        return None
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValueError):
        return None


def _get_bearer_token(request) -> str | None:
    """Extract the Bearer token from Authorization header if present."""
    auth_header = request.META.get("HTTP_AUTHORIZATION", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1]
    return None
