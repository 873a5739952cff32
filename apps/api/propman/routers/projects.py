"""Project endpoints: membership, capabilities, cascade deletion, export and import."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import projects as schemas
from ..services import projects as projects_service
from ..services.permissions import Action, can_mutate
from ..services.store import ProjectStore
from .deps import get_actor_id, get_store, require

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.post("", response_model=schemas.ProjectOut, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: schemas.ProjectCreate,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
) -> schemas.ProjectOut:
    project = await projects_service.create_project(session, payload, actor_id)
    return schemas.ProjectOut.model_validate(project)


@router.get("", response_model=list[schemas.ProjectOut])
async def list_projects(
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
) -> list[schemas.ProjectOut]:
    """Return the projects the caller is a member of."""

    projects = await projects_service.list_projects(session, actor_id)
    return [schemas.ProjectOut.model_validate(project) for project in projects]


@router.get("/{project_id}", response_model=schemas.ProjectOut)
async def get_project(store: ProjectStore = Depends(require(Action.VIEW))) -> schemas.ProjectOut:
    return schemas.ProjectOut.model_validate(store.project)


@router.get("/{project_id}/capabilities")
async def get_capabilities(
    store: ProjectStore = Depends(get_store),
    actor_id: str = Depends(get_actor_id),
) -> dict[str, object]:
    """Return the caller's role and which actions it allows."""

    role = store.role_of(actor_id)
    return {
        "role": role.value if role else None,
        "actions": {action.value: can_mutate(role, action) for action in Action},
    }


@router.put("/{project_id}", response_model=schemas.ProjectOut)
async def update_project(
    payload: schemas.ProjectUpdate,
    store: ProjectStore = Depends(require(Action.MANAGE_PROJECT)),
) -> schemas.ProjectOut:
    project = await projects_service.update_project(store, payload)
    return schemas.ProjectOut.model_validate(project)


@router.delete("/{project_id}")
async def delete_project(store: ProjectStore = Depends(require(Action.MANAGE_PROJECT))) -> dict[str, object]:
    """Delete the project and every record scoped to it."""

    removed = await projects_service.delete_project(store)
    return {"deleted": removed}


@router.get("/{project_id}/export", response_model=schemas.ProjectSnapshot)
async def export_project(
    store: ProjectStore = Depends(require(Action.MANAGE_PROJECT)),
) -> schemas.ProjectSnapshot:
    return await projects_service.export_project(store)


@router.post("/{project_id}/import")
async def import_project(
    payload: schemas.ProjectImport,
    store: ProjectStore = Depends(require(Action.MANAGE_PROJECT)),
) -> dict[str, object]:
    """Replace the project's records with those of an exported snapshot."""

    imported = await projects_service.import_project(store, payload)
    return {"imported": imported}
