"""Serializers for articles and comments with standard envelope support."""

from rest_framework import serializers

from .models import Article, Comment


class ArticleSerializer(serializers.ModelSerializer):
    organization = serializers.PrimaryKeyRelatedField(read_only=True)
    author = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        """Organization and author are fixed at creation and never writable."""
        model = Article
        fields = ["id", "title", "content", "status", "organization", "author", "created_at", "updated_at"]
        read_only_fields = ["id", "organization", "author", "created_at", "updated_at"]


class CommentSerializer(serializers.ModelSerializer):
    article = serializers.PrimaryKeyRelatedField(read_only=True)
    author = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "content", "article", "author", "created_at", "updated_at"]
        read_only_fields = ["id", "article", "author", "created_at", "updated_at"]


__all__ = ["ArticleSerializer", "CommentSerializer"]
