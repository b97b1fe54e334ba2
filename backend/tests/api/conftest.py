"""API test fixtures - SQLite-backed app client with DB and security overridden.

Invariants:
    - Every test gets a fresh in-memory SQLite database with all tables created
    - get_db dependency overridden to use the test session factory
    - db_manager patched so the readiness probe sees the test engine
    - get_security overridden with cheap bcrypt rounds

Design Decisions:
    - SQLite in-memory: fast, no external dependency; exercises the real SqlStore
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import conduit.infrastructure.database as db_module
import conduit.models  # noqa: F401
from conduit.api.dependencies import get_security
from conduit.db.base import Base
from conduit.infrastructure.database import get_db, DatabaseSessionManager
from conduit.infrastructure.security import SecurityService
from conduit.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
def security() -> SecurityService:
    return SecurityService("test-secret", bcrypt_rounds=4)


@pytest.fixture
async def client(test_engine, test_session_factory, security):
    """FastAPI test client with DB and security dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_security] = lambda: security

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def register(client):
    """Register a user over HTTP and return (user_json, auth_headers)."""
    async def _register(username: str, password: str = "password123"):
        response = await client.post("/api/users", json={"user": {
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
        }})
        assert response.status_code == 201, response.text
        user = response.json()["user"]
        return user, {"Authorization": f"Token {user['token']}"}
    return _register
