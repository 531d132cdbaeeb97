"""Alembic environment — migrations for the users/posts/comments schema.

Invariants:
    - Metadata comes from blog_api.models (every table registered on Base)
    - DATABASE_URL wins over sqlalchemy.url in alembic.ini
    - SQLite runs in batch mode (ALTER TABLE support is minimal there)
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection

from alembic import context

import blog_api.models  # noqa: F401
from blog_api.db.base import Base
from blog_api.db.session import async_database_url, create_engine_for

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def migration_url() -> str:
    url = os.environ.get("DATABASE_URL") or config.get_main_option("sqlalchemy.url")
    return async_database_url(url)


def _configure(**kwargs) -> None:
    url = kwargs.get("url") or migration_url()
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=url.startswith("sqlite"),
        compare_type=True,
        **kwargs,
    )


def run_offline() -> None:
    url = migration_url()
    _configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    engine = create_engine_for(migration_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
