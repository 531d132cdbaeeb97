"""Auth Service — register, login, refresh, and access-token resolution.

Invariants:
    - bcrypt runs in the threadpool (run_in_threadpool) so hashing never blocks the event loop
    - Unknown email and wrong password produce the same 401 message
    - Duplicate email on register is a 409
    - Every successful register/login/refresh returns a fresh access + refresh pair
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from blog_api.core import security
from blog_api.core.errors import ConflictError, UnauthorizedError
from blog_api.infrastructure.database import transaction
from blog_api.models.user import User
from blog_api.repositories.users import UserRepository
from blog_api.schemas.auth import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_TOKEN = "Invalid or expired token"


@dataclass
class AuthResult:
    user: User
    access_token: str
    refresh_token: str


def issue_tokens(user: User) -> AuthResult:
    return AuthResult(
        user=user,
        access_token=security.create_access_token(user.id),
        refresh_token=security.create_refresh_token(user.id),
    )


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    async def register(self, payload: RegisterRequest) -> AuthResult:
        if await self.users.get_by_email(payload.email) is not None:
            raise ConflictError("Email is already registered")

        password_hash = await run_in_threadpool(security.hash_password, payload.password)
        async with transaction(self.db):
            user = await self.users.create(
                email=payload.email, password_hash=password_hash, name=payload.name,
            )
        logger.info("User registered", extra={"user_id": user.id})
        return issue_tokens(user)

    async def login(self, payload: LoginRequest) -> AuthResult:
        user = await self.users.get_by_email(payload.email)
        if user is None or not await run_in_threadpool(
            security.verify_password, payload.password, user.password,
        ):
            raise UnauthorizedError(INVALID_CREDENTIALS)
        logger.info("User logged in", extra={"user_id": user.id})
        return issue_tokens(user)

    async def refresh(self, refresh_token: str | None) -> AuthResult:
        if not refresh_token:
            raise UnauthorizedError("Refresh token required")
        try:
            payload = security.decode_refresh_token(refresh_token)
        except security.TokenError as exc:
            raise UnauthorizedError(INVALID_TOKEN) from exc

        user = await self.users.get_by_id(security.user_id_from_payload(payload))
        if user is None:
            raise UnauthorizedError("User no longer exists")
        return issue_tokens(user)

    async def user_from_access_token(self, access_token: str) -> User:
        try:
            payload = security.decode_access_token(access_token)
        except security.TokenError as exc:
            raise UnauthorizedError(INVALID_TOKEN) from exc

        user = await self.users.get_by_id(security.user_id_from_payload(payload))
        if user is None:
            raise UnauthorizedError("User no longer exists")
        return user
