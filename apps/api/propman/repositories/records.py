"""Persistence helpers shared by every project-scoped record type."""
from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import ProjectRecord

RecordT = TypeVar("RecordT", bound=ProjectRecord)


async def list_for_project(
    session: AsyncSession,
    model: type[RecordT],
    *,
    project_id: str,
    property_id: str | None = None,
) -> list[RecordT]:
    """Return every record of ``model`` in the project, oldest first."""

    stmt = select(model).where(model.project_id == project_id)
    if property_id is not None:
        stmt = stmt.where(model.property_id == property_id)  # type: ignore[attr-defined]
    stmt = stmt.order_by(model.created_at.asc(), model.id.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_by_id(
    session: AsyncSession,
    model: type[RecordT],
    *,
    project_id: str,
    record_id: str,
) -> RecordT | None:
    """Return a record by identifier if it belongs to the project."""

    stmt = select(model).where(model.id == record_id, model.project_id == project_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def find_first(
    session: AsyncSession,
    model: type[RecordT],
    *,
    project_id: str,
    **filters: Any,
) -> RecordT | None:
    """Return the oldest record matching the column filters."""

    stmt = select(model).where(model.project_id == project_id)
    for column, value in filters.items():
        stmt = stmt.where(getattr(model, column) == value)
    stmt = stmt.order_by(model.created_at.asc(), model.id.asc()).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def add(session: AsyncSession, record: RecordT) -> RecordT:
    """Stage a new record and flush so defaults are populated."""

    session.add(record)
    await session.flush()
    return record


async def remove(session: AsyncSession, record: ProjectRecord) -> None:
    await session.delete(record)
    await session.flush()


async def delete_for_project(session: AsyncSession, model: type[ProjectRecord], *, project_id: str) -> int:
    """Delete every record of ``model`` in the project and return the row count."""

    result = await session.execute(delete(model).where(model.project_id == project_id))
    return result.rowcount or 0
