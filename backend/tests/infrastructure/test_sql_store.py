"""SQL Store - repositories and edges against in-memory SQLite.

Tests:
    - the application module graph (app, routes, SQL store) imports cleanly
    - follow twice then unfollow leaves no edge; a second unfollow is INVALID_STATE
    - a duplicate edge insert is absorbed by ON CONFLICT DO NOTHING
    - favorite counts are COUNT(*) over the edge table
    - list_matching filters, pages and totals newest first
"""

import importlib

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

import conduit.models  # noqa: F401
from conduit.core.domain_types import ErrorKind
from conduit.core.entities import User, Article
from conduit.core.repository_protocols import ArticleFilter
from conduit.db.base import Base
from conduit.infrastructure.sql_store import SqlStore
from conduit.services.relationship_registry import RelationshipRegistry


@pytest.fixture
async def sql_store():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield SqlStore(session)
    await engine.dispose()


async def _user(store, username: str) -> User:
    user = User(
        username=username, email=f"{username}@example.com", password_hash="x",
    )
    await store.users.add(user)
    return user


async def _article(store, author: User, title: str, tags=()) -> Article:
    article = Article(
        title=title, description="d", body="b",
        author_id=author.id, tag_list=list(tags),
    )
    await store.articles.add(article)
    return article


@pytest.mark.parametrize("module", [
    "conduit.infrastructure.sql_store",
    "conduit.api.dependencies",
    "conduit.main",
])
def test_application_modules_import(module):
    assert importlib.import_module(module) is not None


async def test_follow_unfollow_edges(sql_store):
    registry = RelationshipRegistry(sql_store)
    alice = await _user(sql_store, "alice")
    jake = await _user(sql_store, "jake")

    assert (await registry.follow(alice.id, jake.id)).is_ok
    assert (await registry.follow(alice.id, jake.id)).is_ok
    assert await sql_store.edges.followed_ids(alice.id) == {jake.id}

    assert (await registry.unfollow(alice.id, jake.id)).is_ok
    assert await registry.is_following(alice.id, jake.id) is False

    again = await registry.unfollow(alice.id, jake.id)
    assert again.error.kind is ErrorKind.INVALID_STATE
    assert again.error.message == "is not being followed"


async def test_duplicate_edge_insert_is_ignored(sql_store):
    alice = await _user(sql_store, "alice")
    jake = await _user(sql_store, "jake")

    await sql_store.edges.add_follow(alice.id, jake.id)
    await sql_store.edges.add_follow(alice.id, jake.id)

    assert await sql_store.edges.remove_follow(alice.id, jake.id) is True
    assert await sql_store.edges.remove_follow(alice.id, jake.id) is False


async def test_favorite_counts(sql_store):
    registry = RelationshipRegistry(sql_store)
    jake = await _user(sql_store, "jake")
    alice = await _user(sql_store, "alice")
    article = await _article(sql_store, jake, "How to train your dragon")

    await registry.favorite(jake.id, article.id)
    await registry.favorite(alice.id, article.id)
    await registry.favorite(alice.id, article.id)
    assert await registry.favorites_count(article.id) == 2

    await registry.unfavorite(alice.id, article.id)
    await registry.unfavorite(alice.id, article.id)
    assert await registry.favorites_count(article.id) == 1


async def test_list_matching(sql_store):
    jake = await _user(sql_store, "jake")
    alice = await _user(sql_store, "alice")
    first = await _article(sql_store, jake, "First", ["dragons"])
    await _article(sql_store, alice, "Second", ["training"])
    third = await _article(sql_store, jake, "Third", ["dragons", "training"])

    tagged, total = await sql_store.articles.list_matching(
        ArticleFilter(tag="dragons", limit=20, offset=0),
    )
    assert [a.slug for a in tagged] == [third.slug, first.slug]
    assert total == 2
    assert tagged[0].tag_list == ["dragons", "training"]

    page, total = await sql_store.articles.list_matching(
        ArticleFilter(author_ids=frozenset({jake.id}), limit=1, offset=1),
    )
    assert [a.slug for a in page] == [first.slug]
    assert total == 2

    nobody, total = await sql_store.articles.list_matching(
        ArticleFilter(author_ids=frozenset(), limit=20, offset=0),
    )
    assert nobody == [] and total == 0
