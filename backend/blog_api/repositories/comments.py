"""Comment Repository — per-post listing, create, bulk delete."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blog_api.models.comment import Comment


class CommentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_post(self, post_id: int) -> list[Comment]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .options(selectinload(Comment.author))
            .order_by(Comment.created_at.asc(), Comment.id.asc()),
        )
        return list(result.scalars().all())

    async def create(self, *, post_id: int, author_id: int, content: str) -> Comment:
        comment = Comment(post_id=post_id, author_id=author_id, content=content)
        self.db.add(comment)
        await self.db.flush()
        result = await self.db.execute(
            select(Comment)
            .where(Comment.id == comment.id)
            .options(selectinload(Comment.author))
            .execution_options(populate_existing=True),
        )
        return result.scalar_one()

    async def delete_for_post(self, post_id: int) -> int:
        """Bulk-delete a post's comments; returns how many rows were removed."""
        result = await self.db.execute(
            delete(Comment)
            .where(Comment.post_id == post_id)
            .execution_options(synchronize_session="fetch"),
        )
        return result.rowcount or 0
