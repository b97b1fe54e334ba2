"""Service test fixtures - in-memory store, real security with cheap bcrypt, dispatcher.

Invariants:
    - Every test gets a fresh MemoryStore (no shared state between tests)
    - Users are seeded straight into the store and committed, so handler
      rollbacks never remove fixtures

Design Decisions:
    - In-memory store over SQLite here: handler semantics are tested without SQL;
      the SQL store is exercised by tests/api
    - bcrypt rounds=4: real hashing, fast enough for per-test registration
"""

import pytest

from conduit.core.entities import User
from conduit.infrastructure.security import SecurityService
from conduit.services.dispatch import Dispatcher
from conduit.services.relationship_registry import RelationshipRegistry
from memory_store import MemoryStore


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def security() -> SecurityService:
    return SecurityService("test-secret", bcrypt_rounds=4)


@pytest.fixture
def registry(store) -> RelationshipRegistry:
    return RelationshipRegistry(store)


@pytest.fixture
def dispatcher(store, security) -> Dispatcher:
    return Dispatcher(store, security)


@pytest.fixture
def make_user(store, security):
    """Seed a committed user: await make_user("jake")."""
    async def _make(username: str, password: str = "password123") -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=security.hash_password(password),
        )
        await store.users.add(user)
        await store.commit()
        return user
    return _make
