"""
BileMo API — User Route Handlers
==================================

What:  /api/users list, detail, create, update, delete.
Who:   Any authenticated principal (ROLE_USER). Detail, update and delete
       additionally require the caller to be one of the user's customers;
       that check needs the loaded user, so it runs in UserService.

Status codes for single-user operations:
    404  the id does not exist (checked first)
    403  the user belongs to other customers
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import ListCache, get_list_cache
from app.database import get_db_session
from app.routes.pagination import Page, pagination
from app.schemas.common import ErrorResponse
from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.security.authorization import Action, Principal
from app.security.dependencies import authorized
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])

_errors = {
    401: {"description": "Missing or expired JWT", "model": ErrorResponse},
    403: {"description": "Not authorized for this user", "model": ErrorResponse},
}
_not_found = {404: {"description": "This user doesn't exist", "model": ErrorResponse}}


@router.get(
    "/users",
    responses={200: {"description": "Page of users (JSON array)"}, **_errors},
    summary="List users",
)
async def list_users(
    principal: Principal = Depends(authorized("users", Action.LIST)),
    pager: Page = Depends(pagination),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> Response:
    payload = await user_service.list_users(db, cache, pager.page, pager.limit)
    return Response(content=payload, media_type="application/json")


@router.get(
    "/users/{user_id}",
    response_model=UserRead,
    responses={**_not_found, **_errors},
    summary="Get a single user",
)
async def get_user(
    user_id: int,
    principal: Principal = Depends(authorized("users", Action.DETAIL)),
    db: AsyncSession = Depends(get_db_session),
) -> UserRead:
    return await user_service.get_user(db, principal, user_id)


@router.post(
    "/users",
    status_code=201,
    response_model=UserRead,
    responses={400: {"description": "Invalid user", "model": ErrorResponse}, **_errors},
    summary="Create a user",
)
async def create_user(
    payload: UserCreate,
    request: Request,
    response: Response,
    principal: Principal = Depends(authorized("users", Action.CREATE)),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> UserRead:
    user = await user_service.create_user(db, cache, principal, payload)
    response.headers["Location"] = str(request.url_for("get_user", user_id=user.id))
    return user


@router.put(
    "/users/{user_id}",
    status_code=204,
    response_class=Response,
    responses={
        400: {"description": "Invalid user", "model": ErrorResponse},
        **_not_found,
        **_errors,
    },
    summary="Update a user",
)
async def update_user(
    user_id: int,
    changes: UserUpdate,
    principal: Principal = Depends(authorized("users", Action.UPDATE)),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> Response:
    await user_service.update_user(db, cache, principal, user_id, changes)
    return Response(status_code=204)


@router.delete(
    "/users/{user_id}",
    status_code=204,
    response_class=Response,
    responses={**_not_found, **_errors},
    summary="Delete a user",
)
async def delete_user(
    user_id: int,
    principal: Principal = Depends(authorized("users", Action.DELETE)),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> Response:
    await user_service.delete_user(db, cache, principal, user_id)
    return Response(status_code=204)
