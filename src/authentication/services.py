"""Token service for JWT creation, decoding, and blocklist checks."""

import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Tuple

import jwt
import redis
from django.conf import settings

from access_control.exceptions import Unauthenticated
from core.config import ServiceConfig
from core.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class BlocklistUnavailable(Exception):
    """Raised when Redis blocklist cannot be checked (fail-closed)."""


class TokenService:
    """Handle JWT issuance, decoding, and blocklist operations.

    The service is constructed from an explicit ``ServiceConfig`` so the
    signing key, algorithm, TTLs and Redis location are visible at the call
    site instead of being read from settings on every call.
    """

    BLOCKLIST_PREFIX = "blocklist:token:"

    def __init__(self, config: ServiceConfig):
        self.config = config

    @classmethod
    def from_settings(cls) -> "TokenService":
        return cls(ServiceConfig.from_settings(settings))

    def generate_tokens(self, user) -> Tuple[str, str]:
        """Generate signed access and refresh tokens for the given user."""

        now = datetime.now(timezone.utc)
        access_payload = self._build_payload(user, "access", now, self.config.access_ttl)
        refresh_payload = self._build_payload(user, "refresh", now, self.config.refresh_ttl)

        access_token = jwt.encode(access_payload, self.config.secret_key, algorithm=self.config.jwt_algorithm)
        refresh_token = jwt.encode(refresh_payload, self.config.secret_key, algorithm=self.config.jwt_algorithm)
        return access_token, refresh_token

    @staticmethod
    def _build_payload(user, token_type: str, issued_at: datetime, ttl: timedelta) -> dict[str, Any]:
        exp = issued_at + ttl
        return {
            "sub": str(user.pk),
            "jti": str(uuid.uuid4()),
            "exp": int(exp.timestamp()),
            "iat": int(issued_at.timestamp()),
            "role": getattr(user, "role", None),
            "type": token_type,
        }

    def decode_token(self, token: str, expected_type: str | None = None) -> dict[str, Any]:
        """Decode and validate a JWT; optionally enforce token type."""

        try:
            payload = jwt.decode(token, self.config.secret_key, algorithms=[self.config.jwt_algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise Unauthenticated("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise Unauthenticated("Invalid token") from exc

        if expected_type and payload.get("type") != expected_type:
            raise Unauthenticated("Invalid token type")
        if not payload.get("jti"):
            raise Unauthenticated("Token is missing its identifier")

        return payload

    def block_token(self, jti: str, exp: int) -> None:
        """Add token jti to blocklist until its expiration timestamp."""

        client = get_redis_client(self.config.redis_url)
        ttl_seconds = max(1, exp - int(time.time()))
        try:
            client.setex(f"{self.BLOCKLIST_PREFIX}{jti}", ttl_seconds, "1")
        except redis.RedisError as exc:
            logger.exception("Redis unavailable while blocklisting token %s", jti)
            raise BlocklistUnavailable("Redis unavailable while blocklisting") from exc

    def is_token_blocked(self, jti: str) -> bool:
        """Check if a token jti is present in the blocklist."""

        client = get_redis_client(self.config.redis_url)
        try:
            return client.get(f"{self.BLOCKLIST_PREFIX}{jti}") is not None
        except redis.RedisError as exc:
            logger.exception("Redis unavailable while checking blocklist")
            raise BlocklistUnavailable("Redis unavailable while checking blocklist") from exc


__all__ = ["TokenService", "BlocklistUnavailable"]
