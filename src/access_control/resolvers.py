"""Pipeline stages that turn raw request input into typed context values.

``resolve_tenant`` and ``resolve_principal`` run once per request; the
loaders run per addressed resource. Every stage either returns its value or
raises one of the ``access_control.exceptions`` kinds, and every stage goes
back to the database: nothing is cached between requests.
"""

import logging
import re
from typing import Optional

from django.contrib.auth import get_user_model

from articles.models import Article, Comment
from organizations.models import Organization

from .context import ArticleContext, CommentContext, Principal, RequestContext
from .exceptions import (
    InvalidResourceID,
    InvalidTenant,
    MissingTenant,
    PrincipalNotFound,
    ResourceNotFound,
    TenantMismatch,
    TenantNotFound,
    Unauthenticated,
)
from .policy import derive_permission

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")
# largest value a BigAutoField primary key can hold
MAX_ID = 2**63 - 1


def _parse_digits(raw: object) -> Optional[int]:
    text = str(raw) if raw is not None else ""
    if not _DIGITS.fullmatch(text):
        return None
    return int(text)


def get_by_id(queryset, pk: int):
    """``queryset.get(pk=pk)``; ids past the primary key range are simply absent."""

    if pk > MAX_ID:
        raise queryset.model.DoesNotExist()
    return queryset.get(pk=pk)


def parse_numeric_id(raw: object) -> int:
    """Parse a path-segment id; only positive plain decimal numbers are valid."""

    value = _parse_digits(raw)
    if value is None or value == 0:
        raise InvalidResourceID()
    return value


def resolve_tenant(raw_header: Optional[str]) -> Organization:
    """Load the organization named by the tenant header value."""

    if raw_header is None or not raw_header.strip():
        raise MissingTenant()

    tenant_id = _parse_digits(raw_header.strip())
    if tenant_id is None:
        logger.info("Rejected malformed tenant header %r", raw_header)
        raise InvalidTenant()

    try:
        return get_by_id(Organization.objects, tenant_id)
    except Organization.DoesNotExist:
        logger.info("Tenant %s not found", tenant_id)
        raise TenantNotFound() from None


def resolve_principal(token: Optional[str], token_service) -> Principal:
    """Verify a bearer access token and load the user it was issued for."""

    if not token:
        raise Unauthenticated()

    payload = token_service.decode_token(token, expected_type="access")
    if token_service.is_token_blocked(payload["jti"]):
        logger.info("Rejected blocklisted token %s", payload["jti"])
        raise Unauthenticated("Token has been revoked")

    user_id = _parse_digits(payload.get("sub"))
    if not user_id:
        raise Unauthenticated("Invalid token subject")

    User = get_user_model()
    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        logger.warning("Token subject %s no longer exists", user_id)
        raise PrincipalNotFound() from None
    return Principal.from_user(user)


def load_article(raw_id: object, request_context: RequestContext) -> ArticleContext:
    """Load an article inside the bound tenant and compute the caller's permission."""

    article_id = parse_numeric_id(raw_id)
    try:
        article = get_by_id(Article.objects.select_related("organization"), article_id)
    except Article.DoesNotExist:
        raise ResourceNotFound("Article not found.") from None

    tenant = request_context.tenant
    if tenant is None:
        raise MissingTenant()
    if article.organization_id != tenant.pk:
        logger.warning(
            "User %s addressed article %s of organization %s under tenant %s",
            request_context.principal.user_id,
            article.pk,
            article.organization_id,
            tenant.pk,
        )
        raise TenantMismatch()

    principal = request_context.principal
    permission = derive_permission(article, principal.user_id, principal.role)
    return ArticleContext(request=request_context, article=article, permission=permission)


def load_comment(raw_id: object, article_context: ArticleContext) -> CommentContext:
    """Load a comment that belongs to the already loaded article."""

    comment_id = parse_numeric_id(raw_id)
    try:
        comment = get_by_id(Comment.objects.select_related("article"), comment_id)
    except Comment.DoesNotExist:
        raise ResourceNotFound("Comment not found.") from None

    tenant_id = article_context.request.tenant_id
    if comment.article.organization_id != tenant_id:
        logger.warning("Comment %s is outside tenant %s", comment.pk, tenant_id)
        raise TenantMismatch()
    if comment.article_id != article_context.article.pk:
        raise ResourceNotFound("Comment not found.")

    return CommentContext(article_context=article_context, comment=comment)


__all__ = [
    "get_by_id",
    "load_article",
    "load_comment",
    "parse_numeric_id",
    "resolve_principal",
    "resolve_tenant",
]
