"""User Routes — listing, detail with relations, create (with posts), update, delete.

Invariants:
    - GET /api/users/{id}/posts shows drafts only to the owner
    - PATCH/DELETE only on your own account (403 otherwise)
    - DELETE also clears the caller's auth cookies (the account is gone)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.api.dependencies import get_current_user, get_optional_user
from blog_api.core.cookies import clear_auth_cookies
from blog_api.core.pagination import MAX_ID, build_meta
from blog_api.infrastructure.database import get_db
from blog_api.models.user import User
from blog_api.repositories.posts import PostRepository
from blog_api.repositories.users import UserRepository
from blog_api.schemas.common import PageQuery, success
from blog_api.schemas.post import PostSummaryResponse
from blog_api.schemas.user import UserCreate, UserDetailResponse, UserResponse, UserUpdate
from blog_api.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
async def list_users(
    query: Annotated[PageQuery, Query()],
    db: AsyncSession = Depends(get_db),
):
    users, total = await UserRepository(db).list_users(query.page, query.limit)
    return success(
        [UserResponse.model_validate(u) for u in users],
        meta=build_meta(query.page, query.limit, total),
    )


@router.get("/{user_id}")
async def get_user(
    user_id: int = Path(gt=0, le=MAX_ID),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).get_user_detail(user_id)
    detail = UserDetailResponse.model_validate(user).model_copy(
        update={"post_count": len(user.posts)},
    )
    return success(detail)


@router.get("/{user_id}/posts")
async def list_user_posts(
    query: Annotated[PageQuery, Query()],
    user_id: int = Path(gt=0, le=MAX_ID),
    current_user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    await UserService(db).get_user_or_404(user_id)
    is_owner = current_user is not None and current_user.id == user_id
    posts, total = await PostRepository(db).list_posts(
        page=query.page,
        limit=query.limit,
        author_id=user_id,
        published=None if is_owner else True,
    )
    return success(
        [PostSummaryResponse.model_validate(p) for p in posts],
        meta=build_meta(query.page, query.limit, total),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    user, post_count = await UserService(db).create_user_with_posts(body)
    detail = UserDetailResponse.model_validate(user).model_copy(
        update={"post_count": post_count},
    )
    return success(detail)


@router.patch("/{user_id}")
async def update_user(
    body: UserUpdate,
    user_id: int = Path(gt=0, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).update_user(user_id, body, current_user)
    return success(UserResponse.model_validate(user))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int = Path(gt=0, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await UserService(db).delete_user(user_id, current_user)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_auth_cookies(response)
    return response
