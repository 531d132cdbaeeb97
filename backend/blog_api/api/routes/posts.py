"""Post Routes — paginated search, detail with relations, owner-only writes, comments.

Invariants:
    - GET /api/posts returns {data, meta}; meta.total counts every match, not just the page
    - Writes require an access token; updates/deletes require ownership
    - DELETE /api/posts/{id} runs the transactional delete-with-comments
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.api.dependencies import get_current_user
from blog_api.core.pagination import MAX_ID, build_meta
from blog_api.infrastructure.database import get_db
from blog_api.models.user import User
from blog_api.repositories.posts import PostRepository
from blog_api.schemas.comment import CommentCreate, CommentResponse
from blog_api.schemas.common import success
from blog_api.schemas.post import (
    PostCreate,
    PostDetailResponse,
    PostQuery,
    PostSummaryResponse,
    PostUpdate,
)
from blog_api.services.post_service import PostService

router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.get("")
async def list_posts(
    query: Annotated[PostQuery, Query()],
    db: AsyncSession = Depends(get_db),
):
    posts, total = await PostRepository(db).list_posts(
        page=query.page,
        limit=query.limit,
        search=query.search,
        published=query.published,
        author_id=query.author_id,
    )
    return success(
        [PostSummaryResponse.model_validate(p) for p in posts],
        meta=build_meta(query.page, query.limit, total),
    )


@router.get("/{post_id}")
async def get_post(
    post_id: int = Path(gt=0, le=MAX_ID),
    db: AsyncSession = Depends(get_db),
):
    post = await PostService(db).get_post_detail(post_id)
    return success(PostDetailResponse.model_validate(post))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await PostService(db).create_post(body, current_user)
    return success(PostDetailResponse.model_validate(post))


@router.patch("/{post_id}")
async def update_post(
    body: PostUpdate,
    post_id: int = Path(gt=0, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await PostService(db).update_post(post_id, body, current_user)
    return success(PostDetailResponse.model_validate(post))


@router.patch("/{post_id}/publish")
async def publish_post(
    post_id: int = Path(gt=0, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await PostService(db).publish_post(post_id, current_user)
    return success(PostDetailResponse.model_validate(post))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int = Path(gt=0, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await PostService(db).delete_post_with_comments(post_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{post_id}/comments")
async def list_comments(
    post_id: int = Path(gt=0, le=MAX_ID),
    db: AsyncSession = Depends(get_db),
):
    comments = await PostService(db).list_comments(post_id)
    return success([CommentResponse.model_validate(c) for c in comments])


@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(
    body: CommentCreate,
    post_id: int = Path(gt=0, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await PostService(db).create_comment(post_id, body, current_user)
    return success(CommentResponse.model_validate(comment))
