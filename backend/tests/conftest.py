"""Root conftest — test environment, in-memory DB, and HTTP client fixtures.

Invariants:
    - Environment variables are set before blog_api is imported (settings are cached)
    - Every test gets a fresh in-memory SQLite database with FK enforcement on
    - get_db dependency overridden to use the test DB; db_manager patched for readiness probes

Design Decisions:
    - StaticPool: request sessions and test_db share one in-memory connection
    - client_factory: one AsyncClient per user so cookie jars never mix
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-0123456789abcdef")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import blog_api.infrastructure.database as db_module  # noqa: E402
from blog_api.db.base import Base  # noqa: E402
from blog_api.db.session import create_engine_for  # noqa: E402
from blog_api.infrastructure.database import DatabaseSessionManager, get_db  # noqa: E402
from blog_api.main import app  # noqa: E402

PASSWORD = "password123"


@pytest.fixture
async def test_engine():
    engine = create_engine_for(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client_factory(test_engine, test_session_factory):
    """Build AsyncClients bound to the app with the DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    clients: list[AsyncClient] = []

    def _make(raise_app_exceptions: bool = True) -> AsyncClient:
        c = AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
            base_url="http://test",
        )
        clients.append(c)
        return c

    yield _make

    for c in clients:
        await c.aclose()
    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def client(client_factory):
    return client_factory()


async def register(
    client: AsyncClient, email: str, name: str | None = None, password: str = PASSWORD,
) -> dict:
    """Register through the API (the client keeps the auth cookies); returns the user."""
    body = {"email": email, "password": password}
    if name is not None:
        body["name"] = name
    res = await client.post("/api/auth/register", json=body)
    assert res.status_code == 201, res.text
    return res.json()["data"]["user"]


@pytest.fixture
async def alice(client_factory):
    """Authenticated client for alice; returns (client, user)."""
    c = client_factory()
    user = await register(c, "alice@example.com", "Alice")
    return c, user


@pytest.fixture
async def bob(client_factory):
    """Authenticated client for bob; returns (client, user)."""
    c = client_factory()
    user = await register(c, "bob@example.com", "Bob")
    return c, user


@pytest.fixture
def production_settings(monkeypatch):
    """Make the error handlers behave as in production."""
    from blog_api.api import error_handlers
    from blog_api.config import get_settings

    prod = get_settings().model_copy(update={"environment": "production"})
    monkeypatch.setattr(error_handlers, "get_settings", lambda: prod)
    return prod


@pytest.fixture
def register_user():
    return register
