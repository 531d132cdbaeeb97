"""UserService — atomic creation of a user with initial posts.

Tests cover:
    - user and posts are created together
    - a failing post create leaves no user behind
    - duplicate email is a ConflictError before anything is written
"""

import pytest
from sqlalchemy import func, select

from blog_api.core.errors import ConflictError
from blog_api.models import Post, User
from blog_api.repositories.posts import PostRepository
from blog_api.repositories.users import UserRepository
from blog_api.schemas.user import UserCreate
from blog_api.services.user_service import UserService


def _payload(**overrides) -> UserCreate:
    data = {
        "email": "writer@example.com",
        "password": "password123",
        "name": "Writer",
        "posts": [{"title": "One"}, {"title": "Two", "published": True}],
    }
    data.update(overrides)
    return UserCreate(**data)


async def test_create_user_with_posts(test_db):
    user, post_count = await UserService(test_db).create_user_with_posts(_payload())

    assert post_count == 2
    assert user.email == "writer@example.com"
    assert user.password != "password123"
    assert len((await UserRepository(test_db).get_with_posts(user.id)).posts) == 2


async def test_create_user_rolls_back_when_a_post_fails(test_db, monkeypatch):
    calls = 0
    original_create = PostRepository.create

    async def fail_second(self, **kwargs):
        nonlocal calls
        calls += 1
        if calls == 2:
            raise RuntimeError("insert failed")
        return await original_create(self, **kwargs)

    monkeypatch.setattr(PostRepository, "create", fail_second)

    with pytest.raises(RuntimeError):
        await UserService(test_db).create_user_with_posts(_payload())

    assert await UserRepository(test_db).get_by_email("writer@example.com") is None
    assert await test_db.scalar(select(func.count()).select_from(Post)) == 0


async def test_duplicate_email_conflicts(test_db):
    service = UserService(test_db)
    await service.create_user_with_posts(_payload(posts=None))

    with pytest.raises(ConflictError):
        await service.create_user_with_posts(_payload(email="WRITER@example.com", posts=None))

    assert await test_db.scalar(select(func.count()).select_from(User)) == 1
