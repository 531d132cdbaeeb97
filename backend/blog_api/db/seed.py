"""Seed Script — fills the database with demo users, posts and comments.

Usage:
    python -m blog_api.db.seed            # wipe rows, insert demo data
    python -m blog_api.db.seed --reset    # drop and recreate all tables first

Invariants:
    - Runs in a single transaction: either all demo data lands or none does
    - Every demo user's password is DEMO_PASSWORD
"""

import argparse
import asyncio
import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.config import get_settings
from blog_api.core.security import hash_password
from blog_api.db.base import Base
from blog_api.db.session import create_session_factory
from blog_api.infrastructure.database import transaction
from blog_api.infrastructure.observability import setup_logging
from blog_api.models import Comment, Post, User

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {
        "email": "alice@example.com",
        "name": "Alice",
        "posts": [
            {
                "title": "Getting started with FastAPI",
                "content": "Routers, dependencies and exception handlers in one afternoon.",
                "published": True,
            },
            {
                "title": "Async SQLAlchemy sessions",
                "content": "One session per request, committed by the service layer.",
                "published": True,
            },
            {
                "title": "Draft: JWT in cookies",
                "content": "Why httponly cookies beat localStorage for tokens.",
                "published": False,
            },
        ],
    },
    {
        "email": "bob@example.com",
        "name": "Bob",
        "posts": [
            {
                "title": "Pagination done right",
                "content": "Offset pagination with a total count and stable ordering.",
                "published": True,
            },
        ],
    },
    {
        "email": "carol@example.com",
        "name": "Carol",
        "posts": [],
    },
]

DEMO_COMMENTS = [
    ("bob@example.com", "Getting started with FastAPI", "Great intro, thanks!"),
    ("carol@example.com", "Getting started with FastAPI", "Dependencies finally make sense."),
    ("alice@example.com", "Pagination done right", "What about cursor pagination?"),
    ("carol@example.com", "Async SQLAlchemy sessions", "expire_on_commit=False saved me."),
]


async def clear_data(db: AsyncSession) -> None:
    """Delete rows child-first so FK constraints never trip."""
    for model in (Comment, Post, User):
        await db.execute(delete(model))


async def seed(db: AsyncSession) -> dict[str, int]:
    """Insert demo data; returns per-table counts."""
    password_hash = hash_password(DEMO_PASSWORD)
    users: dict[str, User] = {}
    posts: dict[str, Post] = {}

    async with transaction(db):
        await clear_data(db)

        for demo in DEMO_USERS:
            user = User(email=demo["email"], name=demo["name"], password=password_hash)
            db.add(user)
            await db.flush()
            users[user.email] = user
            for post_fields in demo["posts"]:
                post = Post(author_id=user.id, **post_fields)
                db.add(post)
                await db.flush()
                posts[post.title] = post

        for author_email, post_title, content in DEMO_COMMENTS:
            db.add(Comment(
                post_id=posts[post_title].id,
                author_id=users[author_email].id,
                content=content,
            ))
        await db.flush()

    return {"users": len(users), "posts": len(posts), "comments": len(DEMO_COMMENTS)}


async def run(reset: bool = False) -> dict[str, int]:
    settings = get_settings()
    engine, session_factory = create_session_factory(settings.database_url)
    try:
        if reset:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Tables dropped and recreated")
        async with session_factory() as db:
            counts = await seed(db)
    finally:
        await engine.dispose()
    logger.info(
        f"Seeded {counts['users']} users, {counts['posts']} posts, "
        f"{counts['comments']} comments",
    )
    return counts


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the blog database with demo data.")
    parser.add_argument(
        "--reset", action="store_true",
        help="drop and recreate all tables before seeding",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, "text")
    asyncio.run(run(reset=args.reset))


if __name__ == "__main__":
    main()
