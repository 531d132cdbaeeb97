"""Post Service — ownership-checked post writes and the transactional delete.

Invariants:
    - Only the author may update, publish, or delete a post (403 otherwise)
    - delete_post_with_comments removes comments then the post in ONE transaction;
      any failure rolls back both, so no orphaned comments and no half-deleted post
    - Comments can only be added to an existing post (404 otherwise)
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core.errors import ForbiddenError, NotFoundError
from blog_api.infrastructure.database import transaction
from blog_api.models.comment import Comment
from blog_api.models.post import Post
from blog_api.models.user import User
from blog_api.repositories.comments import CommentRepository
from blog_api.repositories.posts import PostRepository
from blog_api.schemas.comment import CommentCreate
from blog_api.schemas.post import PostCreate, PostUpdate

logger = logging.getLogger(__name__)


def ensure_owner(post: Post, user: User) -> None:
    if post.author_id != user.id:
        raise ForbiddenError("You can only modify your own posts")


class PostService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.posts = PostRepository(db)
        self.comments = CommentRepository(db)

    async def get_post_or_404(self, post_id: int) -> Post:
        post = await self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return post

    async def get_post_detail(self, post_id: int) -> Post:
        post = await self.posts.get_with_relations(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return post

    async def create_post(self, payload: PostCreate, author: User) -> Post:
        async with transaction(self.db):
            post = await self.posts.create(
                author_id=author.id,
                title=payload.title,
                content=payload.content,
                published=payload.published,
            )
        return await self.get_post_detail(post.id)

    async def update_post(self, post_id: int, payload: PostUpdate, user: User) -> Post:
        post = await self.get_post_or_404(post_id)
        ensure_owner(post, user)
        async with transaction(self.db):
            await self.posts.update(post, **payload.model_dump(exclude_unset=True))
        return await self.get_post_detail(post_id)

    async def publish_post(self, post_id: int, user: User) -> Post:
        post = await self.get_post_or_404(post_id)
        ensure_owner(post, user)
        if not post.published:
            async with transaction(self.db):
                await self.posts.update(post, published=True)
        return await self.get_post_detail(post_id)

    async def delete_post_with_comments(self, post_id: int, user: User) -> int:
        """Delete a post and all its comments atomically; returns deleted comment count."""
        async with transaction(self.db):
            post = await self.get_post_or_404(post_id)
            ensure_owner(post, user)
            deleted_comments = await self.comments.delete_for_post(post_id)
            await self.posts.delete(post)
        logger.info(
            f"Deleted post {post_id} with {deleted_comments} comment(s)",
            extra={"user_id": user.id},
        )
        return deleted_comments

    async def list_comments(self, post_id: int) -> list[Comment]:
        await self.get_post_or_404(post_id)
        return await self.comments.list_for_post(post_id)

    async def create_comment(
        self, post_id: int, payload: CommentCreate, author: User,
    ) -> Comment:
        await self.get_post_or_404(post_id)
        async with transaction(self.db):
            comment = await self.comments.create(
                post_id=post_id, author_id=author.id, content=payload.content,
            )
        return comment
