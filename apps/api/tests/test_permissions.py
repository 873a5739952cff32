"""Role capability table."""
from __future__ import annotations

import pytest
from fastapi import HTTPException

from propman.models.project import ProjectMemberRole
from propman.services.permissions import Action, can_mutate, ensure_allowed


@pytest.mark.parametrize("action", list(Action))
def test_owner_can_do_everything(action):
    assert can_mutate(ProjectMemberRole.OWNER, action)


def test_editor_cannot_view_history_or_manage():
    role = ProjectMemberRole.EDITOR

    assert can_mutate(role, Action.CREATE)
    assert can_mutate(role, Action.DELETE)
    assert not can_mutate(role, Action.VIEW_HISTORY)
    assert not can_mutate(role, Action.MANAGE_PROJECT)


def test_viewer_can_only_view():
    allowed = {action for action in Action if can_mutate(ProjectMemberRole.VIEWER, action)}

    assert allowed == {Action.VIEW}


def test_non_member_can_do_nothing():
    assert not any(can_mutate(None, action) for action in Action)


def test_ensure_allowed_raises_forbidden():
    with pytest.raises(HTTPException) as exc:
        ensure_allowed(ProjectMemberRole.VIEWER, Action.CREATE, user_id="user-1")

    assert exc.value.status_code == 403
    assert exc.value.detail == "Role 'viewer' cannot create"

    with pytest.raises(HTTPException) as exc:
        ensure_allowed(None, Action.VIEW, user_id="user-2")

    assert exc.value.detail == "Not a member of this project"
