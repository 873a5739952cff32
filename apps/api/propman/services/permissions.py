"""Role based capability checks for project members."""
from __future__ import annotations

import enum
import logging

from fastapi import HTTPException, status

from ..models.project import ProjectMemberRole

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    VIEW_HISTORY = "view_history"
    MANAGE_PROJECT = "manage_project"


_RECORD_ACTIONS = frozenset({Action.VIEW, Action.CREATE, Action.UPDATE, Action.DELETE})

ROLE_ACTIONS: dict[ProjectMemberRole, frozenset[Action]] = {
    ProjectMemberRole.OWNER: frozenset(Action),
    ProjectMemberRole.EDITOR: _RECORD_ACTIONS,
    ProjectMemberRole.VIEWER: frozenset({Action.VIEW}),
}


def can_mutate(role: ProjectMemberRole | None, action: Action) -> bool:
    """Return True when ``role`` may perform ``action``; non-members may do nothing."""

    if role is None:
        return False
    return action in ROLE_ACTIONS.get(role, frozenset())


def ensure_allowed(role: ProjectMemberRole | None, action: Action, *, user_id: str) -> None:
    """Raise 403 unless ``role`` grants ``action``."""

    if role is None:
        logger.warning("User %s is not a member of the project", user_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a member of this project")
    if not can_mutate(role, action):
        logger.warning("User %s with role %s refused %s", user_id, role.value, action.value)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Role '{role.value}' cannot {action.value.replace('_', ' ')}",
        )
