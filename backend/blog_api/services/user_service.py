"""User Service — transactional user writes.

Invariants:
    - create_user_with_posts is all-or-nothing: a failing post rolls back the user
    - update_user rehashes a new password and rejects an email owned by another user (409)
    - delete_user removes the user's posts and comments via FK cascade
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from blog_api.core import security
from blog_api.core.errors import ConflictError, ForbiddenError, NotFoundError
from blog_api.infrastructure.database import transaction
from blog_api.models.user import User
from blog_api.repositories.posts import PostRepository
from blog_api.repositories.users import UserRepository
from blog_api.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.posts = PostRepository(db)

    async def get_user_or_404(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def get_user_detail(self, user_id: int) -> User:
        user = await self.users.get_with_posts(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def create_user_with_posts(self, payload: UserCreate) -> tuple[User, int]:
        """Create a user and any initial posts in one transaction; returns (user, post_count)."""
        if await self.users.get_by_email(payload.email) is not None:
            raise ConflictError("Email is already registered")

        password_hash = await run_in_threadpool(security.hash_password, payload.password)
        initial_posts = payload.posts or []
        async with transaction(self.db):
            user = await self.users.create(
                email=payload.email, password_hash=password_hash, name=payload.name,
            )
            for post in initial_posts:
                await self.posts.create(
                    author_id=user.id,
                    title=post.title,
                    content=post.content,
                    published=post.published,
                )
        logger.info(
            f"Created user with {len(initial_posts)} post(s)",
            extra={"user_id": user.id},
        )
        return user, len(initial_posts)

    async def update_user(
        self, user_id: int, payload: UserUpdate, current_user: User,
    ) -> User:
        user = await self.get_user_or_404(user_id)
        if user.id != current_user.id:
            raise ForbiddenError("You can only update your own account")

        fields = payload.model_dump(exclude_unset=True)
        if "email" in fields and fields["email"] != user.email:
            existing = await self.users.get_by_email(fields["email"])
            if existing is not None and existing.id != user.id:
                raise ConflictError("Email is already registered")
        if "password" in fields:
            fields["password"] = await run_in_threadpool(
                security.hash_password, fields["password"],
            )

        async with transaction(self.db):
            user = await self.users.update(user, **fields)
        return user

    async def delete_user(self, user_id: int, current_user: User) -> None:
        user = await self.get_user_or_404(user_id)
        if user.id != current_user.id:
            raise ForbiddenError("You can only delete your own account")
        async with transaction(self.db):
            await self.users.delete(user)
        logger.info("User deleted", extra={"user_id": user_id})
