"""Article and comment endpoints guarded by tenant isolation and capability gates."""

import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from access_control.exceptions import Forbidden
from access_control.gates import Capability, can_view
from access_control.mixins import TenantScopedMixin
from access_control.permissions import HasArticleCapability, IsPrincipal
from access_control.policy import derive_permission
from access_control.resolvers import load_article, load_comment
from core.response import BaseViewSet, api_response
from .models import Article, ArticleStatus
from .serializers import ArticleSerializer, CommentSerializer

logger = logging.getLogger(__name__)


class ArticleViewSet(TenantScopedMixin, BaseViewSet):
    """Tenant-scoped article CRUD plus nested comments.

    Detail actions never use the queryset for lookups: ``load_article`` fetches
    the article, rejects it when it belongs to another organization, and binds
    the caller's permission, which ``HasArticleCapability`` then checks against
    ``capability_by_action``.
    """

    serializer_class = ArticleSerializer
    permission_classes = [IsPrincipal, HasArticleCapability]
    tenant_agnostic_actions = ("metadata", "published", "mine")
    capability_by_action = {
        "retrieve": Capability.VIEW,
        "update": Capability.EDIT,
        "partial_update": Capability.EDIT,
        "destroy": Capability.OWN,
        "comments": Capability.VIEW,
        "create_comment": Capability.COMMENT,
        "update_comment": Capability.COMMENT,
        "destroy_comment": Capability.OWN,
    }

    article_context = None

    def get_queryset(self):
        return Article.objects.filter(organization=self.tenant).select_related("author")

    def _load(self, comment_id=None):
        """Run the resource loader, then the gate for the current action."""
        lookup_url_kwarg = self.lookup_url_kwarg or self.lookup_field
        article_ctx = load_article(self.kwargs[lookup_url_kwarg], self.request_context)
        self.article_context = article_ctx
        if comment_id is None:
            self.check_object_permissions(self.request, article_ctx)
            return article_ctx
        comment_ctx = load_comment(comment_id, article_ctx)
        self.check_object_permissions(self.request, comment_ctx)
        return comment_ctx

    def get_object(self):
        return self._load().article

    def list(self, request, *args, **kwargs):
        """List the tenant's articles the caller is allowed to view."""
        principal = self.request_context.principal
        visible = [
            article
            for article in self.get_queryset()
            if can_view(derive_permission(article, principal.user_id, principal.role))
        ]
        return api_response(self.get_serializer(visible, many=True).data)

    def retrieve(self, request, *args, **kwargs):
        """Return the article together with the caller's permission level."""
        article = self.get_object()
        return api_response(
            {
                "article": self.get_serializer(article).data,
                "permission": self.article_context.permission.label,
            }
        )

    def perform_create(self, serializer):
        """Bind the article to the request's tenant and the caller as author."""
        article = serializer.save(organization=self.tenant, author=self.request.user)
        logger.info("User %s created article %s in organization %s", article.author_id, article.pk, self.tenant.pk)

    def perform_destroy(self, instance):
        logger.info("User %s deleted article %s", self.request.user.pk, instance.pk)
        instance.delete()

    @action(detail=False, methods=["get"], permission_classes=[AllowAny])
    def published(self, request):
        """Published articles from every organization; no tenant or login required."""
        articles = Article.objects.filter(status=ArticleStatus.PUBLISHED).select_related("author")
        return api_response(ArticleSerializer(articles, many=True).data)

    @action(detail=False, methods=["get"], url_path="my")
    def mine(self, request):
        """Articles written by the caller across all organizations."""
        articles = Article.objects.filter(author=request.user)
        return api_response(ArticleSerializer(articles, many=True).data)

    @action(detail=True, methods=["get"])
    def comments(self, request, pk=None):
        article = self.get_object()
        return api_response(CommentSerializer(article.comments.all(), many=True).data)

    @comments.mapping.post
    def create_comment(self, request, pk=None):
        article = self.get_object()
        serializer = CommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(article=article, author=request.user)
        return api_response(serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch"], url_path=r"comments/(?P<comment_id>[^/.]+)")
    def update_comment(self, request, pk=None, comment_id=None):
        """Only the comment's author may change it, and only while they can still comment."""
        comment_ctx = self._load(comment_id)
        if not comment_ctx.is_author:
            raise Forbidden("Only the author of a comment can update it.")
        serializer = CommentSerializer(comment_ctx.comment, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(serializer.data)

    @update_comment.mapping.delete
    def destroy_comment(self, request, pk=None, comment_id=None):
        """Article owners moderate comments; deleting one is owner-only."""
        comment_ctx = self._load(comment_id)
        comment_ctx.comment.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


__all__ = ["ArticleViewSet"]
