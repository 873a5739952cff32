"""Project creation, membership management, cascade deletion, export and restore."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import FlushError

from ..models.project import Project, ProjectMember, ProjectMemberRole
from ..repositories import projects as projects_repo
from ..repositories import records as records_repo
from ..repositories import users as users_repo
from ..schemas import projects as schemas
from . import records as records_service
from .history import generate_id
from .store import ProjectStore

logger = logging.getLogger(__name__)

DATA_VERSION = 2


async def create_project(session: AsyncSession, payload: schemas.ProjectCreate, user_id: str) -> Project:
    """Create a project owned by ``user_id``."""

    if await users_repo.get_by_id(session, user_id) is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")

    project = Project(
        id=generate_id("proj"),
        name=payload.name,
        owner_id=user_id,
        members=[ProjectMember(user_id=user_id, role=ProjectMemberRole.OWNER)],
    )
    await projects_repo.add(session, project)
    await session.commit()
    logger.info("Project %s created by %s", project.id, user_id)
    return project


async def list_projects(session: AsyncSession, user_id: str) -> list[Project]:
    return await projects_repo.list_for_user(session, user_id)


async def update_project(store: ProjectStore, payload: schemas.ProjectUpdate) -> Project:
    """Rename the project and replace its member list.

    The owner always stays a member with the OWNER role.
    """

    project = store.project
    requested = {member.user_id: member.role for member in payload.members}
    if len(requested) != len(payload.members):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Duplicate project member")
    if requested.setdefault(project.owner_id, ProjectMemberRole.OWNER) != ProjectMemberRole.OWNER:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The project owner must keep the owner role",
        )
    for member_id in requested:
        if await users_repo.get_by_id(store.session, member_id) is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Unknown user '{member_id}'",
            )

    project.name = payload.name
    current = {member.user_id: member for member in project.members}
    for member_id, member in current.items():
        if member_id not in requested:
            project.members.remove(member)
        else:
            member.role = requested[member_id]
    for member_id, role in requested.items():
        if member_id not in current:
            project.members.append(ProjectMember(user_id=member_id, role=role))

    await store.save()
    logger.info("Project %s updated with %d members", project.id, len(project.members))
    return project


async def delete_project(store: ProjectStore) -> dict[str, int]:
    """Delete the project together with every record scoped to it."""

    removed: dict[str, int] = {}
    for kind in records_service.KINDS.values():
        removed[kind.path] = await records_repo.delete_for_project(
            store.session, kind.model, project_id=store.project_id
        )
    await projects_repo.remove(store.session, store.project)
    await store.save()
    logger.info("Project %s deleted with records %s", store.project_id, removed)
    return removed


async def export_project(store: ProjectStore) -> schemas.ProjectSnapshot:
    """Return every record of the project in one document."""

    snapshot: dict[str, list] = {}
    for kind in records_service.KINDS.values():
        records = await records_service.list_records(store, kind)
        snapshot[kind.path] = [kind.out_schema.model_validate(record) for record in records]

    return schemas.ProjectSnapshot(
        data_version=DATA_VERSION,
        exported_at=datetime.now(timezone.utc),
        project=schemas.ProjectOut.model_validate(store.project),
        **snapshot,
    )


def upgrade_snapshot(payload: schemas.ProjectImport) -> dict[str, list[dict[str, Any]]]:
    """Return the snapshot's records shaped for the current data version."""

    if payload.data_version > DATA_VERSION:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported data version {payload.data_version}",
        )

    records = {
        kind.path: [dict(raw) for raw in getattr(payload, kind.path)] for kind in records_service.KINDS.values()
    }
    if payload.data_version < 2:
        # Version 1 properties carried no creation date.
        stamp = datetime.now(timezone.utc).isoformat()
        for raw in records[records_service.PROPERTIES.path]:
            if not raw.get("creation_date") and not raw.get("created_at"):
                raw["creation_date"] = stamp
    return records


async def import_project(store: ProjectStore, payload: schemas.ProjectImport) -> dict[str, int]:
    """Replace every record of the project with the records of a snapshot.

    Records keep their ids and history; the snapshot's own project id is ignored.
    """

    project_id = store.project_id
    records = upgrade_snapshot(payload)

    staged: list[tuple[records_service.RecordKind, Any]] = []
    for kind in records_service.KINDS.values():
        for index, raw in enumerate(records[kind.path]):
            try:
                item = kind.out_schema.model_validate({**raw, "project_id": project_id})
            except ValidationError as exc:
                error = exc.errors()[0]
                location = ".".join(str(part) for part in error["loc"])
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=f"Invalid {kind.name} at index {index}: {error['msg']} ({location})",
                ) from exc
            staged.append((kind, item))

    imported: dict[str, int] = {kind.path: 0 for kind in records_service.KINDS.values()}
    try:
        for kind in records_service.KINDS.values():
            for record in await records_service.list_records(store, kind):
                await records_repo.remove(store.session, record)
        for kind, item in staged:
            store.session.add(kind.model(**_snapshot_columns(kind, item)))
            imported[kind.path] += 1
        await store.session.flush()
    except (IntegrityError, FlushError) as exc:
        await store.discard()
        logger.warning("Snapshot import into project %s clashed with existing records", project_id)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Snapshot records clash with records stored elsewhere",
        ) from exc

    await store.save()
    logger.info("Project %s restored from snapshot v%d: %s", project_id, payload.data_version, imported)
    return imported


def _snapshot_columns(kind: records_service.RecordKind, item: Any) -> dict[str, Any]:
    values = kind.to_columns(item)
    values.pop("creation_date", None)
    values["history"] = [entry.model_dump(mode="json") for entry in item.history]
    if kind is records_service.PROPERTIES:
        values["created_at"] = item.creation_date
    return values
