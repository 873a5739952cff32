"""Project-bound unit of work passed into the record services."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.project import Project, ProjectMemberRole
from ..repositories import projects as projects_repo

logger = logging.getLogger(__name__)


class ProjectStore:
    """Session plus the project every read and write is scoped to.

    Obtain one with :meth:`load`; staged changes become durable on :meth:`save`.
    """

    def __init__(self, session: AsyncSession, project: Project) -> None:
        self.session = session
        self.project = project

    @classmethod
    async def load(cls, session: AsyncSession, project_id: str) -> "ProjectStore":
        project = await projects_repo.get_by_id(session, project_id)
        if project is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
        return cls(session, project)

    @property
    def project_id(self) -> str:
        return self.project.id

    def role_of(self, user_id: str) -> ProjectMemberRole | None:
        return self.project.role_of(user_id)

    async def save(self) -> None:
        await self.session.commit()

    async def discard(self) -> None:
        logger.info("Discarding staged changes for project %s", self.project_id)
        await self.session.rollback()
