"""Typed values handed from one pipeline stage to the next.

Each stage produces one of these frozen dataclasses and the next stage only
accepts that type, so a handler can never run with a partially resolved
request. Constructors check the invariants the later stages rely on.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .policy import ROLE_MEMBER, PermissionLevel


@dataclass(frozen=True)
class Principal:
    """The authenticated acting user for a request."""

    user: Any
    user_id: int
    role: str = ROLE_MEMBER

    def __post_init__(self) -> None:
        if self.user_id is None or self.user_id <= 0:
            raise ValueError("Principal requires a positive user_id")
        if not self.role:
            raise ValueError("Principal requires a role")

    @classmethod
    def from_user(cls, user: Any) -> "Principal":
        """Build a principal from a user; a blank stored role means ``member``."""
        role = getattr(user, "role", "") or ROLE_MEMBER
        return cls(user=user, user_id=user.pk, role=role)


@dataclass(frozen=True)
class RequestContext:
    """Resolved tenant (may be absent on tenant-agnostic routes) and principal."""

    tenant: Optional[Any]
    principal: Principal

    @property
    def tenant_id(self) -> Optional[int]:
        return self.tenant.pk if self.tenant is not None else None


@dataclass(frozen=True)
class ArticleContext:
    """An article loaded inside its own tenant with the caller's permission."""

    request: RequestContext
    article: Any
    permission: PermissionLevel

    def __post_init__(self) -> None:
        if self.request.tenant is None:
            raise ValueError("ArticleContext requires a bound tenant")
        if self.article.organization_id != self.request.tenant_id:
            raise ValueError("ArticleContext article must belong to the bound tenant")

    @property
    def principal(self) -> Principal:
        return self.request.principal


@dataclass(frozen=True)
class CommentContext:
    """A comment addressed through the article it belongs to."""

    article_context: ArticleContext
    comment: Any

    def __post_init__(self) -> None:
        if self.comment.article_id != self.article_context.article.pk:
            raise ValueError("CommentContext comment must belong to the article")

    @property
    def permission(self) -> PermissionLevel:
        return self.article_context.permission

    @property
    def is_author(self) -> bool:
        return self.comment.author_id == self.article_context.principal.user_id


__all__ = ["ArticleContext", "CommentContext", "Principal", "RequestContext"]
