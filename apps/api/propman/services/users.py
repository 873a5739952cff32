"""User registration, sign-in, approval and removal."""
from __future__ import annotations

import logging

import bcrypt
from fastapi import HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.project import Project, ProjectMember
from ..models.user import User, UserStatus
from ..repositories import users as users_repo
from ..schemas.projects import UserCreate, UserSignIn, UserUpdate
from .history import generate_id

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""

    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, stored: str | None) -> bool:
    if not stored:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a bcrypt hash")
        return False


async def get_user(session: AsyncSession, user_id: str) -> User:
    user = await users_repo.get_by_id(session, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


async def create_user(session: AsyncSession, payload: UserCreate) -> User:
    """Register a user awaiting approval; the very first user is approved at once."""

    if await users_repo.get_by_email(session, payload.email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    first_user = await users_repo.count_active(session) == 0
    user = User(
        id=generate_id("user"),
        name=payload.name,
        email=payload.email,
        status=UserStatus.ACTIVE if first_user else UserStatus.PENDING,
        password=hash_password(payload.password) if payload.password else None,
    )
    await users_repo.add(session, user)
    await session.commit()
    logger.info("Registered user %s (%s)", user.id, user.status.value)
    return user


async def sign_in(session: AsyncSession, user_id: str, payload: UserSignIn) -> User:
    """Confirm the caller may act as ``user_id``.

    Users registered without a password sign in without one.
    """

    user = await get_user(session, user_id)
    if user.password and not verify_password(payload.password or "", user.password):
        logger.warning("Rejected sign-in for user %s", user_id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect password")
    if user.status != UserStatus.ACTIVE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is awaiting approval")
    return user


async def update_user(session: AsyncSession, user_id: str, payload: UserUpdate, actor_id: str) -> User:
    if actor_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Users may only edit their own profile")
    user = await get_user(session, user_id)
    existing = await users_repo.get_by_email(session, payload.email)
    if existing is not None and existing.id != user.id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user.name = payload.name
    user.email = payload.email
    if payload.password:
        user.password = hash_password(payload.password)
    await session.commit()
    return user


async def approve_user(session: AsyncSession, user_id: str, actor_id: str) -> User:
    actor = await get_user(session, actor_id)
    if actor.status != UserStatus.ACTIVE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only active users can approve others")
    user = await get_user(session, user_id)
    if user.status != UserStatus.ACTIVE:
        user.status = UserStatus.ACTIVE
        await session.commit()
        logger.info("User %s approved by %s", user.id, actor_id)
    return user


async def delete_user(session: AsyncSession, user_id: str, actor_id: str) -> None:
    """Remove a user and their memberships, never the last active user."""

    await get_user(session, actor_id)
    user = await get_user(session, user_id)
    if user.status == UserStatus.ACTIVE and await users_repo.count_active(session) <= 1:
        logger.warning("Refusing to delete last active user %s", user_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Cannot delete the last active user")

    owned = await session.scalar(select(Project.id).where(Project.owner_id == user_id).limit(1))
    if owned is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Transfer or delete the user's projects first",
        )

    await session.execute(delete(ProjectMember).where(ProjectMember.user_id == user_id))
    await users_repo.remove(session, user)
    await session.commit()
    logger.info("User %s deleted by %s", user_id, actor_id)
