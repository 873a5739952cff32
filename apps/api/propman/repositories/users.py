"""User persistence helpers."""
from __future__ import annotations

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User, UserStatus


async def get_by_id(session: AsyncSession, user_id: str) -> User | None:
    """Return a user by identifier."""

    return await session.get(User, user_id)


async def get_by_email(session: AsyncSession, email: str) -> User | None:
    stmt: Select[tuple[User]] = select(User).where(func.lower(User.email) == email.lower())
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_users(session: AsyncSession, *, status: UserStatus | None = None) -> list[User]:
    stmt = select(User)
    if status is not None:
        stmt = stmt.where(User.status == status)
    stmt = stmt.order_by(User.created_at.asc(), User.id.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_active(session: AsyncSession) -> int:
    stmt = select(func.count(User.id)).where(User.status == UserStatus.ACTIVE)
    result = await session.execute(stmt)
    return result.scalar_one()


async def add(session: AsyncSession, user: User) -> User:
    session.add(user)
    await session.flush()
    return user


async def remove(session: AsyncSession, user: User) -> None:
    await session.delete(user)
    await session.flush()
