"""Capability gates translating a permission level into allow/deny."""

from enum import Enum

from .policy import PermissionLevel


def can_view(level: PermissionLevel) -> bool:
    return level >= PermissionLevel.VIEW


def can_comment(level: PermissionLevel) -> bool:
    return level >= PermissionLevel.COMMENT


def can_edit(level: PermissionLevel) -> bool:
    return level >= PermissionLevel.EDIT


def is_owner(level: PermissionLevel) -> bool:
    return level == PermissionLevel.OWNER


class Capability(str, Enum):
    """Operation kinds a view action can require on an article."""

    VIEW = "view"
    COMMENT = "comment"
    EDIT = "edit"
    OWN = "own"

    def allows(self, level: PermissionLevel) -> bool:
        """Evaluate the gate bound to this capability."""
        return _GATES[self](level)


_GATES = {
    Capability.VIEW: can_view,
    Capability.COMMENT: can_comment,
    Capability.EDIT: can_edit,
    Capability.OWN: is_owner,
}


__all__ = ["Capability", "can_comment", "can_edit", "can_view", "is_owner"]
