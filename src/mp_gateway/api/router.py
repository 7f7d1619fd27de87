"""Identity endpoints.

POST /auth/register   email + password, always role ``user`` (201)
POST /auth/login      access + refresh token pair
POST /auth/refresh    new access token carrying the current role
GET  /auth/me         the Principal the order engine will see
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import get_current_principal
from src.mp_gateway.auth.principal import Principal
from src.mp_gateway.user.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from src.mp_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]

_ACCESS_TTL_SECONDS = settings.JWT_EXPIRE_MINUTES * 60


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, request: Request, db: DbSession) -> ApiResponse:
    async with db.begin():
        user = await _service.register(body.email, body.password, db)

    created = RegisterResponse(
        user_id=user.id,
        email=user.email,
        role=user.role,
        created_at=user.created_at.isoformat(),
    )
    return success_response(created.model_dump(), request)


@router.post("/login")
async def login(body: LoginRequest, request: Request, db: DbSession) -> ApiResponse:
    user, access, refresh = await _service.login(body.email, body.password, db)
    tokens = LoginResponse(
        access_token=access,
        refresh_token=refresh,
        expires_in=_ACCESS_TTL_SECONDS,
        user=UserInfo(user_id=user.id, email=user.email, role=user.role),
    )
    return success_response(tokens.model_dump(), request)


@router.post("/refresh")
async def refresh(body: RefreshRequest, request: Request, db: DbSession) -> ApiResponse:
    access = await _service.refresh(body.refresh_token, db)
    return success_response(
        RefreshResponse(access_token=access, expires_in=_ACCESS_TTL_SECONDS).model_dump(),
        request,
    )


@router.get("/me")
async def me(
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> ApiResponse:
    return success_response(
        {"user_id": principal.user_id, "role": principal.role.value}, request
    )
