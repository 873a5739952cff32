"""Request dependencies resolving the acting user and the project store."""
from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..services.permissions import Action, ensure_allowed
from ..services.store import ProjectStore


async def get_actor_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the caller's user id from the ``X-User-Id`` header."""

    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id header is required")
    return x_user_id.strip()


async def get_store(project_id: str, session: AsyncSession = Depends(get_session)) -> ProjectStore:
    return await ProjectStore.load(session, project_id)


def require(action: Action) -> Callable[..., Awaitable[ProjectStore]]:
    """Dependency factory returning the store once the caller's role allows ``action``."""

    async def dependency(
        store: ProjectStore = Depends(get_store),
        actor_id: str = Depends(get_actor_id),
    ) -> ProjectStore:
        ensure_allowed(store.role_of(actor_id), action, user_id=actor_id)
        return store

    return dependency
