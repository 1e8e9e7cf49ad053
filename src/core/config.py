"""Explicit service configuration passed to the token service and resolvers."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any


@dataclass(frozen=True)
class ServiceConfig:
    """Immutable snapshot of the settings the request pipeline depends on.

    Built once from Django settings by whoever owns a pipeline stage (the JWT
    middleware at startup, a view when it initialises) and handed down
    explicitly, so no stage reads settings on its own.
    """

    secret_key: str
    redis_url: str
    jwt_algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(hours=24)
    tenant_header: str = "X-Organization-ID"
    require_tenant_membership: bool = False

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise ValueError("secret_key must not be empty")
        if not self.tenant_header:
            raise ValueError("tenant_header must not be empty")

    @classmethod
    def from_settings(cls, settings: Any) -> "ServiceConfig":
        """Build the config from a Django settings object."""
        return cls(
            secret_key=settings.SECRET_KEY,
            redis_url=settings.REDIS_URL,
            jwt_algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
            access_ttl=timedelta(minutes=getattr(settings, "ACCESS_TOKEN_TTL_MINUTES", 15)),
            refresh_ttl=timedelta(hours=getattr(settings, "REFRESH_TOKEN_TTL_HOURS", 24)),
            tenant_header=getattr(settings, "TENANT_HEADER", "X-Organization-ID"),
            require_tenant_membership=getattr(settings, "REQUIRE_TENANT_MEMBERSHIP", False),
        )


__all__ = ["ServiceConfig"]
