import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from usuarios_api.config import settings
from usuarios_api.db.session import Base, get_db
from usuarios_api.main import app

# Fixtures living outside conftest.py must be registered as plugins.
pytest_plugins = ["tests.seeds"]

# In-memory SQLite by default; point at Postgres with
# TEST_DATABASE_URL=postgresql+asyncpg://usuarios@localhost:5432/usuarios_test
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")

GESTOR_TOKEN = "gestor-test-token"


@pytest_asyncio.fixture
async def db() -> AsyncIterator[AsyncSession]:
    """Create tables and yield a session, then drop tables after test."""
    poolclass = StaticPool if TEST_DATABASE_URL.startswith("sqlite") else NullPool
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=poolclass)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_sessionmaker(engine, expire_on_commit=False)() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the test session.

    The override keeps the production transaction contract (commit on
    success, rollback on error) so a failed request does not poison the
    session for the next one. App exceptions are not re-raised by the
    transport: the catch-all handler's 500 response is what we assert on.
    """

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def gestor_headers(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Authorization header carrying a token that holds the GESTOR role."""
    monkeypatch.setattr(settings, "gestor_tokens", [GESTOR_TOKEN])
    return {"Authorization": f"Bearer {GESTOR_TOKEN}"}


@pytest.fixture
def strict_company_reference(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "strict_company_reference", True)
