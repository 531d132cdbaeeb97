"""Post Repository — relation loading, filtered/paginated listing, writes.

Invariants:
    - list_posts returns (page_items, total_matching) using the same filters for both
    - search is a case-insensitive substring match on title OR content
    - ordering is newest first (created_at desc, id desc) so pages are stable
"""

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blog_api.core.pagination import offset_for
from blog_api.models.comment import Comment
from blog_api.models.post import Post

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """ILIKE pattern matching term literally; % and _ in user input are not wildcards."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _apply_filters(
    query: Select,
    *,
    search: str | None = None,
    published: bool | None = None,
    author_id: int | None = None,
) -> Select:
    if search:
        pattern = contains_pattern(search)
        query = query.where(or_(
            Post.title.ilike(pattern, escape=LIKE_ESCAPE),
            Post.content.ilike(pattern, escape=LIKE_ESCAPE),
        ))
    if published is not None:
        query = query.where(Post.published == published)
    if author_id is not None:
        query = query.where(Post.author_id == author_id)
    return query


class PostRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, post_id: int) -> Post | None:
        return await self.db.get(Post, post_id)

    async def get_with_relations(self, post_id: int) -> Post | None:
        """Post with its author, comments, and each comment's author eager-loaded."""
        result = await self.db.execute(
            select(Post)
            .where(Post.id == post_id)
            .options(
                selectinload(Post.author),
                selectinload(Post.comments).selectinload(Comment.author),
            )
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def list_posts(
        self,
        *,
        page: int,
        limit: int,
        search: str | None = None,
        published: bool | None = None,
        author_id: int | None = None,
    ) -> tuple[list[Post], int]:
        filters = {"search": search, "published": published, "author_id": author_id}

        total = await self.db.scalar(
            _apply_filters(select(func.count()).select_from(Post), **filters),
        )
        result = await self.db.execute(
            _apply_filters(select(Post), **filters)
            .options(selectinload(Post.author))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset_for(page, limit))
            .limit(limit),
        )
        return list(result.scalars().all()), int(total or 0)

    async def create(
        self,
        *,
        author_id: int,
        title: str,
        content: str | None = None,
        published: bool = False,
    ) -> Post:
        post = Post(
            author_id=author_id, title=title, content=content, published=published,
        )
        self.db.add(post)
        await self.db.flush()
        await self.db.refresh(post)
        return post

    async def update(self, post: Post, **fields: object) -> Post:
        for key, value in fields.items():
            setattr(post, key, value)
        await self.db.flush()
        await self.db.refresh(post)
        return post

    async def delete(self, post: Post) -> None:
        await self.db.delete(post)
        await self.db.flush()
