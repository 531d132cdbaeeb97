"""Auth Dependencies — resolve the current user from the accessToken cookie.

Invariants:
    - Cookie wins over the Authorization header when both are present
    - Missing token → 401 "Authentication required"; bad/expired token → 401
    - get_optional_user never raises for a missing or bad token
"""

from fastapi import Cookie, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core.cookies import ACCESS_COOKIE_NAME
from blog_api.core.errors import UnauthorizedError
from blog_api.infrastructure.database import get_db
from blog_api.models.user import User
from blog_api.services.auth_service import AuthService


def _extract_token(cookie_token: str | None, authorization: str | None) -> str | None:
    if cookie_token and cookie_token.strip():
        return cookie_token.strip()

    raw = (authorization or "").strip()
    if not raw:
        return None
    scheme, _, token = raw.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_access_token(
    access_token: str | None = Cookie(default=None, alias=ACCESS_COOKIE_NAME),
    authorization: str | None = Header(default=None),
) -> str | None:
    return _extract_token(access_token, authorization)


async def get_current_user(
    token: str | None = Depends(get_access_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    if not token:
        raise UnauthorizedError("Authentication required")
    return await AuthService(db).user_from_access_token(token)


async def get_optional_user(
    token: str | None = Depends(get_access_token),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    if not token:
        return None
    try:
        return await AuthService(db).user_from_access_token(token)
    except UnauthorizedError:
        return None
