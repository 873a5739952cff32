"""Project persistence helpers."""
from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.project import Project, ProjectMember


async def get_by_id(session: AsyncSession, project_id: str) -> Project | None:
    """Return a project with its members loaded."""

    stmt: Select[tuple[Project]] = select(Project).where(Project.id == project_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_for_user(session: AsyncSession, user_id: str) -> list[Project]:
    """Return the projects in which the user holds any role."""

    stmt = (
        select(Project)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .where(ProjectMember.user_id == user_id)
        .order_by(Project.created_at.asc(), Project.id.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().unique().all())


async def add(session: AsyncSession, project: Project) -> Project:
    session.add(project)
    await session.flush()
    return project


async def remove(session: AsyncSession, project: Project) -> None:
    await session.delete(project)
    await session.flush()
