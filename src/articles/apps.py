"""App configuration for articles and comments."""

from django.apps import AppConfig


class ArticlesConfig(AppConfig):
    """Articles app holds tenant-scoped articles, their comments and endpoints."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "articles"
