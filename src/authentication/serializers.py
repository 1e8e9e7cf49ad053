"""Serializers for authentication flows (register, login, profile)."""

from typing import cast

from django.contrib.auth import get_user_model
from rest_framework import serializers

from access_control.exceptions import Unauthenticated
from organizations.models import Organization
from organizations.serializers import OrganizationSerializer

from .managers import DEFAULT_ROLE, MAX_PASSWORD_BYTES, UserManager

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    """Validate and create a user, optionally joining an organization."""

    name = serializers.CharField(max_length=150, allow_blank=False)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    role = serializers.CharField(max_length=50, required=False, allow_blank=True, default=DEFAULT_ROLE)
    organization_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)

    @staticmethod
    def validate_email(value):
        """Ensure email is unique before creation."""
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already in use")
        return value

    @staticmethod
    def validate_password(value):
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise serializers.ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value

    @staticmethod
    def validate_organization_id(value):
        if value is not None and not Organization.objects.filter(pk=value).exists():
            raise serializers.ValidationError("Organization not found")
        return value

    def create(self, validated_data):
        """Create the user and add them to the requested organization."""
        organization_id = validated_data.pop("organization_id", None)
        manager = cast(UserManager, User.objects)
        user = manager.create_user(**validated_data)
        if organization_id is not None:
            Organization.objects.get(pk=organization_id).members.add(user)
        return user


class LoginSerializer(serializers.Serializer):
    """Authenticate a user via email/password using bcrypt verification."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        """Authenticate credentials and attach the user to validated_data."""
        if len(attrs.get("password", "").encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise Unauthenticated("Invalid credentials")

        try:
            user = User.objects.get(email__iexact=attrs.get("email"))
        except User.DoesNotExist:
            raise Unauthenticated("Invalid credentials")

        if not user.check_password(attrs.get("password")):
            raise Unauthenticated("Invalid credentials")

        attrs["user"] = user
        return attrs


class UserDetailSerializer(serializers.ModelSerializer):
    """Read-only user profile payload for responses."""

    organizations = OrganizationSerializer(many=True, read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email", "role", "organizations", "date_joined"]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Patchable fields for /auth/me updates."""

    class Meta:
        model = User
        fields = ["name"]
        extra_kwargs = {"name": {"required": False, "allow_blank": False}}

    def validate(self, attrs):
        """Reject attempts to change email or role through the profile endpoint."""
        initial = getattr(self, "initial_data", {})
        for field in ("email", "role"):
            if field in initial:
                raise serializers.ValidationError(f"{field.capitalize()} cannot be updated via this endpoint")
        return super().validate(attrs)


__all__ = [
    "LoginSerializer",
    "ProfileUpdateSerializer",
    "RegisterSerializer",
    "UserDetailSerializer",
]
