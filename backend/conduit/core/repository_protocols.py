"""Boundary Protocols - contracts between core handlers and the storage shell.

Invariants:
    - Core and services NEVER import SQLAlchemy; all IO goes through these Protocols
    - Repositories exchange domain entities (core/entities.py), never ORM rows
    - Edges are id pairs held by EdgeStore; entities never embed each other
    - Mutations are staged until Store.commit(); the dispatcher owns commit/rollback

Design Decisions:
    - Protocol over ABC: structural subtyping, so the SQL store and the in-memory
      test store share no base class
    - Async methods: implementations do IO; the pure mapping functions that consume
      their results stay synchronous
"""

from dataclasses import dataclass
from typing import Iterable, Protocol

from conduit.core.domain_types import UserId, ArticleId, CommentId
from conduit.core.entities import User, Article, Comment, Tag


@dataclass(frozen=True)
class ArticleFilter:
    """Resolved article listing criteria (usernames already mapped to ids)."""
    tag: str | None = None
    author_id: UserId | None = None
    favorited_by: UserId | None = None
    author_ids: frozenset[UserId] | None = None
    limit: int = 20
    offset: int = 0


class UserRepository(Protocol):
    async def get(self, user_id: UserId) -> User | None: ...
    async def get_by_username(self, username: str) -> User | None: ...
    async def get_by_email(self, email: str) -> User | None: ...
    async def get_many(self, user_ids: Iterable[UserId]) -> dict[UserId, User]: ...
    async def add(self, user: User) -> None: ...
    async def update(self, user: User) -> None: ...
    async def delete_all(self) -> None: ...


class ArticleRepository(Protocol):
    async def get_by_slug(self, slug: str) -> Article | None: ...
    async def slug_taken(
        self, slug: str, exclude_id: ArticleId | None = None,
    ) -> bool: ...
    async def add(self, article: Article) -> None: ...
    async def update(self, article: Article) -> None: ...
    async def delete(self, article_id: ArticleId) -> None: ...
    async def list_matching(self, criteria: ArticleFilter) -> tuple[list[Article], int]: ...
    async def delete_all(self) -> None: ...


class CommentRepository(Protocol):
    async def get(self, comment_id: CommentId) -> Comment | None: ...
    async def list_for_article(self, article_id: ArticleId) -> list[Comment]: ...
    async def add(self, comment: Comment) -> None: ...
    async def delete(self, comment_id: CommentId) -> None: ...
    async def delete_all(self) -> None: ...


class TagRepository(Protocol):
    async def all(self) -> list[Tag]: ...
    async def delete_all(self) -> None: ...


class EdgeStore(Protocol):
    """Follow (user -> user) and Favorite (user -> article) edges."""
    async def has_follow(self, follower_id: UserId, followed_id: UserId) -> bool: ...
    async def add_follow(self, follower_id: UserId, followed_id: UserId) -> None: ...
    async def remove_follow(self, follower_id: UserId, followed_id: UserId) -> bool: ...
    async def followed_among(
        self, follower_id: UserId, candidates: Iterable[UserId],
    ) -> set[UserId]: ...
    async def followed_ids(self, follower_id: UserId) -> set[UserId]: ...
    async def has_favorite(self, user_id: UserId, article_id: ArticleId) -> bool: ...
    async def add_favorite(self, user_id: UserId, article_id: ArticleId) -> None: ...
    async def remove_favorite(self, user_id: UserId, article_id: ArticleId) -> bool: ...
    async def favorited_among(
        self, user_id: UserId, article_ids: Iterable[ArticleId],
    ) -> set[ArticleId]: ...
    async def count_favorites(
        self, article_ids: Iterable[ArticleId],
    ) -> dict[ArticleId, int]: ...
    async def delete_all(self) -> None: ...


class Store(Protocol):
    """Unit of work: all repositories share one transaction."""
    users: UserRepository
    articles: ArticleRepository
    comments: CommentRepository
    tags: TagRepository
    edges: EdgeStore

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


class Credentials(Protocol):
    """Password hashing and token issuing, implemented by infrastructure/security.py."""
    def hash_password(self, password: str) -> str: ...
    def verify_password(self, password: str, password_hash: str) -> bool: ...
    def create_access_token(self, user_id: UserId, username: str) -> str: ...
