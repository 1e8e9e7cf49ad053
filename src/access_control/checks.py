"""System checks for capability gate configuration."""

from django.core.checks import Error, register

from access_control.gates import Capability
from access_control.permissions import HasArticleCapability

STANDARD_DETAIL_ACTIONS = ("retrieve", "update", "partial_update", "destroy")


def _detail_actions(view_cls) -> list[str]:
    """Names of every action that addresses a single article."""
    names = [name for name in STANDARD_DETAIL_ACTIONS if hasattr(view_cls, name)]
    for extra in view_cls.get_extra_actions():
        if extra.detail:
            names.extend(extra.mapping.values())
    return names


@register()
def article_actions_declare_capability(app_configs, **kwargs):
    """Ensure every article detail action declares the gate it requires.

    ``HasArticleCapability`` denies actions missing from
    ``capability_by_action``; this check reports them at startup instead.
    """
    errors: list[Error] = []

    # Import here to avoid circular imports at module load time.
    from articles.views import ArticleViewSet

    for view_cls in [ArticleViewSet]:
        if HasArticleCapability not in getattr(view_cls, "permission_classes", []):
            continue
        declared = getattr(view_cls, "capability_by_action", {})
        for name in _detail_actions(view_cls):
            capability = declared.get(name)
            if not isinstance(capability, Capability):
                errors.append(
                    Error(
                        f"{view_cls.__name__}.{name} does not declare a Capability in capability_by_action.",
                        obj=view_cls,
                        id="access_control.E001",
                    )
                )

    return errors
