"""Shared fixtures: an in-memory database, a seeded project and an API client."""
from __future__ import annotations

from types import SimpleNamespace

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from propman.db.session import get_session
from propman.main import app
from propman.models import Base, Project, ProjectMember, User
from propman.models.project import ProjectMemberRole
from propman.models.user import UserStatus
from propman.services.store import ProjectStore


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(session_factory) -> SimpleNamespace:
    """Three active users holding each role in one project."""

    ids = SimpleNamespace(owner="user-owner", editor="user-editor", viewer="user-viewer", project="proj-1")
    async with session_factory() as session:
        for user_id in (ids.owner, ids.editor, ids.viewer):
            session.add(User(id=user_id, name=user_id, email=f"{user_id}@example.com", status=UserStatus.ACTIVE))
        session.add(
            Project(
                id=ids.project,
                name="Portfolio",
                owner_id=ids.owner,
                members=[
                    ProjectMember(user_id=ids.owner, role=ProjectMemberRole.OWNER),
                    ProjectMember(user_id=ids.editor, role=ProjectMemberRole.EDITOR),
                    ProjectMember(user_id=ids.viewer, role=ProjectMemberRole.VIEWER),
                ],
            )
        )
        await session.commit()
    return ids


@pytest_asyncio.fixture
async def store(session_factory, seeded):
    async with session_factory() as session:
        yield await ProjectStore.load(session, seeded.project)


@pytest_asyncio.fixture
async def client(session_factory):
    async def _get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()
