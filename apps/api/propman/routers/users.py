"""User registration and approval endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..models.user import UserStatus
from ..repositories import users as users_repo
from ..schemas import projects as schemas
from ..services import users as users_service
from .deps import get_actor_id

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: schemas.UserCreate,
    session: AsyncSession = Depends(get_session),
) -> schemas.UserOut:
    """Register a user; new users wait for approval."""

    user = await users_service.create_user(session, payload)
    return schemas.UserOut.model_validate(user)


@router.get("", response_model=list[schemas.UserOut])
async def list_users(
    status_filter: UserStatus | None = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_session),
) -> list[schemas.UserOut]:
    users = await users_repo.list_users(session, status=status_filter)
    return [schemas.UserOut.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=schemas.UserOut)
async def get_user(user_id: str, session: AsyncSession = Depends(get_session)) -> schemas.UserOut:
    return schemas.UserOut.model_validate(await users_service.get_user(session, user_id))


@router.put("/{user_id}", response_model=schemas.UserOut)
async def update_user(
    user_id: str,
    payload: schemas.UserUpdate,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
) -> schemas.UserOut:
    user = await users_service.update_user(session, user_id, payload, actor_id)
    return schemas.UserOut.model_validate(user)


@router.post("/{user_id}/sign-in", response_model=schemas.UserOut)
async def sign_in(
    user_id: str,
    payload: schemas.UserSignIn,
    session: AsyncSession = Depends(get_session),
) -> schemas.UserOut:
    """Check the user's password before the client starts acting as them."""

    user = await users_service.sign_in(session, user_id, payload)
    return schemas.UserOut.model_validate(user)


@router.post("/{user_id}/approve", response_model=schemas.UserOut)
async def approve_user(
    user_id: str,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
) -> schemas.UserOut:
    user = await users_service.approve_user(session, user_id, actor_id)
    return schemas.UserOut.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
) -> Response:
    await users_service.delete_user(session, user_id, actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
