"""Auth Security — bcrypt password hashing and JWT issuance/verification.

Invariants:
    - Access and refresh tokens are signed with different secrets
    - Every token carries sub (user id as str), type, iat, exp
    - decode_* functions raise TokenError for any invalid token, never jwt exceptions

Design Decisions:
    - Refresh tokens are stateless JWTs; logout only clears cookies
"""

import time
from typing import Any

import bcrypt
import jwt

from blog_api.config import get_settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# bcrypt only looks at the first 72 bytes; newer releases raise past that
BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Token is missing, malformed, expired or of the wrong type."""


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")[:BCRYPT_MAX_BYTES]
    if not password:
        raise ValueError("Password is empty.")
    rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")[:BCRYPT_MAX_BYTES]
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def _build_token(user_id: int, token_type: str, secret: str, ttl_seconds: int) -> str:
    issued_at = int(time.time())
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + ttl_seconds,
    }
    return jwt.encode(payload, secret, algorithm=get_settings().jwt_algorithm)


def create_access_token(user_id: int) -> str:
    settings = get_settings()
    return _build_token(
        user_id,
        ACCESS_TOKEN_TYPE,
        settings.jwt_access_secret,
        settings.access_token_expire_minutes * 60,
    )


def create_refresh_token(user_id: int) -> str:
    settings = get_settings()
    return _build_token(
        user_id,
        REFRESH_TOKEN_TYPE,
        settings.jwt_refresh_secret,
        settings.refresh_token_expire_days * 24 * 60 * 60,
    )


def _decode(token: str, secret: str, expected_type: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise TokenError("Token is empty.")

    try:
        payload = jwt.decode(
            raw, secret, algorithms=[get_settings().jwt_algorithm],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError("Invalid token.") from exc

    if payload.get("type") != expected_type:
        raise TokenError(f"Expected a {expected_type} token.")

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise TokenError("Invalid token subject.")
    return payload


def decode_access_token(token: str) -> dict[str, Any]:
    return _decode(token, get_settings().jwt_access_secret, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> dict[str, Any]:
    return _decode(token, get_settings().jwt_refresh_secret, REFRESH_TOKEN_TYPE)


def user_id_from_payload(payload: dict[str, Any]) -> int:
    return int(payload["sub"])
