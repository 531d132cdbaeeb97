"""Auth Routes — register, login, refresh, logout, me.

Invariants:
    - register/login/refresh set both auth cookies; logout clears them
    - Tokens travel only in httponly cookies, never in the JSON body
"""

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.api.dependencies import get_current_user
from blog_api.core.cookies import REFRESH_COOKIE_NAME, clear_auth_cookies, set_auth_cookies
from blog_api.infrastructure.database import get_db
from blog_api.models.user import User
from blog_api.schemas.auth import LoginRequest, RegisterRequest
from blog_api.schemas.common import success
from blog_api.schemas.user import UserResponse
from blog_api.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    result = await AuthService(db).register(body)
    set_auth_cookies(response, result.access_token, result.refresh_token)
    return success({"user": UserResponse.model_validate(result.user)})


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    result = await AuthService(db).login(body)
    set_auth_cookies(response, result.access_token, result.refresh_token)
    return success({"user": UserResponse.model_validate(result.user)})


@router.post("/refresh")
async def refresh(
    response: Response,
    refresh_token: str | None = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    db: AsyncSession = Depends(get_db),
):
    result = await AuthService(db).refresh(refresh_token)
    set_auth_cookies(response, result.access_token, result.refresh_token)
    return success({"user": UserResponse.model_validate(result.user)})


@router.post("/logout")
async def logout(response: Response):
    clear_auth_cookies(response)
    return {"success": True, "message": "Logged out"}


@router.get("/me")
async def me(current_user: User = Depends(get_current_user)):
    return success({"user": UserResponse.model_validate(current_user)})
