"""
BileMo API — Login Route
==========================

POST /api/login_check exchanges an email and password for a bearer token.
It is the only /api route that accepts anonymous requests.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.common import ErrorResponse
from app.services.auth_service import auth_service

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/login_check",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Obtain a JWT",
)
async def login_check(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    token = await auth_service.login(db, credentials.username, credentials.password)
    return TokenResponse(token=token)
