"""User Repository — lookups, paginated listing, create/update/delete for users."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blog_api.core.pagination import offset_for
from blog_api.models.user import User


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower()),
        )
        return result.scalar_one_or_none()

    async def list_users(self, page: int, limit: int) -> tuple[list[User], int]:
        total = await self.db.scalar(select(func.count()).select_from(User))
        result = await self.db.execute(
            select(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(offset_for(page, limit))
            .limit(limit),
        )
        return list(result.scalars().all()), int(total or 0)

    async def get_with_posts(self, user_id: int) -> User | None:
        """User with the posts relationship loaded (drafts included)."""
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.posts))
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def create(self, *, email: str, password_hash: str, name: str | None = None) -> User:
        user = User(email=email.strip().lower(), password=password_hash, name=name)
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def update(self, user: User, **fields: object) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self.db.delete(user)
        await self.db.flush()
