"""User CRUD endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, Response, status

from ...deps import UserServiceDependency
from ...schemas import UserCreate, UserDetail, UserRead, UserUpdate
from ._payloads import parse_replacement

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserDetail], summary="List users with their tasks")
async def list_users(service: UserServiceDependency) -> list[UserDetail]:
    users = await service.list_users()
    return [UserDetail.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=UserDetail, summary="Retrieve a user by id")
async def get_user(user_id: int, service: UserServiceDependency) -> UserDetail:
    return UserDetail.model_validate(await service.get_user(user_id))


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user(
    payload: UserCreate,
    request: Request,
    response: Response,
    service: UserServiceDependency,
) -> UserRead:
    user = await service.create_user(name=payload.name)
    response.headers["Location"] = str(request.url_for("get_user", user_id=user.id))
    return UserRead.model_validate(user)


@router.put(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace a user",
)
async def update_user(
    user_id: int,
    body: Annotated[dict[str, Any], Body(examples=[{"id": 1, "name": "Camille Dupont", "version": 1}])],
    service: UserServiceDependency,
) -> Response:
    """Replace the user's name. Send ``version`` to guard against lost updates."""
    payload = parse_replacement("user", user_id, body, UserUpdate)
    await service.update_user(
        user_id,
        payload_id=payload.id,
        name=payload.name,
        version=payload.version,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a user",
)
async def delete_user(user_id: int, service: UserServiceDependency) -> Response:
    await service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
