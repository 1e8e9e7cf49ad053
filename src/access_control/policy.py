"""Permission engine: derive a user's permission level on an article.

The engine is a pure function of the article's author and status plus the
acting user's id and role. It never touches the database and never raises.
Rules are evaluated top to bottom; the first match wins:

1. the author always gets ``OWNER``;
2. ``admin`` gets ``EDIT``;
3. ``editor`` gets ``EDIT`` on published articles and ``COMMENT`` on drafts;
4. ``member`` gets ``COMMENT`` on published articles and ``VIEW`` on drafts;
5. ``viewer`` and any unrecognised role get ``VIEW`` on published articles
   and ``NONE`` on drafts.
"""

from enum import IntEnum
from typing import Any, Optional

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_MEMBER = "member"
ROLE_VIEWER = "viewer"

KNOWN_ROLES = (ROLE_ADMIN, ROLE_EDITOR, ROLE_MEMBER, ROLE_VIEWER)

STATUS_PUBLISHED = "published"


class PermissionLevel(IntEnum):
    """Totally ordered permission levels; a higher level implies the lower ones."""

    NONE = 0
    VIEW = 1
    COMMENT = 2
    EDIT = 3
    OWNER = 4

    @property
    def label(self) -> str:
        """Lower-case name used in API payloads (``"view"``, ``"owner"``...)."""
        return self.name.lower()


def derive_permission(article: Any, user_id: Optional[int], role: Optional[str]) -> PermissionLevel:
    """Return the permission ``user_id`` with ``role`` holds on ``article``.

    ``article`` only needs ``author_id`` and ``status`` attributes, so both
    model instances and lightweight stand-ins work.
    """

    if user_id is not None and article.author_id == user_id:
        return PermissionLevel.OWNER

    published = article.status == STATUS_PUBLISHED
    role = role or ""

    if role == ROLE_ADMIN:
        return PermissionLevel.EDIT
    if role == ROLE_EDITOR:
        return PermissionLevel.EDIT if published else PermissionLevel.COMMENT
    if role == ROLE_MEMBER:
        return PermissionLevel.COMMENT if published else PermissionLevel.VIEW
    # viewer and anything unrecognised share the same rule
    return PermissionLevel.VIEW if published else PermissionLevel.NONE


__all__ = [
    "KNOWN_ROLES",
    "PermissionLevel",
    "ROLE_ADMIN",
    "ROLE_EDITOR",
    "ROLE_MEMBER",
    "ROLE_VIEWER",
    "derive_permission",
]
