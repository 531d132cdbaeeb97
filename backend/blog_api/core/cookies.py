"""Auth Cookies — set and clear the accessToken / refreshToken cookie pair.

Invariants:
    - Both cookies are httponly with samesite=strict
    - secure flag is on in production only
    - refreshToken is scoped to /api/auth so it is only sent to auth endpoints
"""

from fastapi import Response

from blog_api.config import get_settings

ACCESS_COOKIE_NAME = "accessToken"
REFRESH_COOKIE_NAME = "refreshToken"
ACCESS_COOKIE_PATH = "/"
REFRESH_COOKIE_PATH = "/api/auth"


def set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=ACCESS_COOKIE_NAME,
        value=access_token,
        max_age=settings.access_token_expire_minutes * 60,
        path=ACCESS_COOKIE_PATH,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        path=REFRESH_COOKIE_PATH,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


def clear_auth_cookies(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        ACCESS_COOKIE_NAME, path=ACCESS_COOKIE_PATH,
        httponly=True, secure=settings.cookie_secure, samesite="strict",
    )
    response.delete_cookie(
        REFRESH_COOKIE_NAME, path=REFRESH_COOKIE_PATH,
        httponly=True, secure=settings.cookie_secure, samesite="strict",
    )
