"""In-memory Store - dict-backed implementation of the repository Protocols for tests.

Invariants:
    - Entities are copied on the way in and out, so handler mutations never leak
      into storage without an explicit add/update
    - rollback() restores the state captured at the last commit()
    - Listing order matches the SQL store: newest article first, oldest comment first
"""

import copy
from dataclasses import dataclass, field
from typing import Iterable

from conduit.core.domain_types import UserId, ArticleId, CommentId
from conduit.core.entities import User, Article, Comment, Tag
from conduit.core.repository_protocols import ArticleFilter


@dataclass
class _Tables:
    users: dict[UserId, User] = field(default_factory=dict)
    articles: dict[ArticleId, Article] = field(default_factory=dict)
    comments: dict[CommentId, Comment] = field(default_factory=dict)
    tags: set[str] = field(default_factory=set)
    follows: set[tuple[UserId, UserId]] = field(default_factory=set)
    favorites: set[tuple[UserId, ArticleId]] = field(default_factory=set)


class MemoryUserRepository:
    def __init__(self, store: "MemoryStore"):
        self._store = store

    @property
    def _rows(self) -> dict[UserId, User]:
        return self._store.tables.users

    async def get(self, user_id):
        user = self._rows.get(user_id)
        return copy.deepcopy(user) if user else None

    async def get_by_username(self, username):
        for user in self._rows.values():
            if user.username == username:
                return copy.deepcopy(user)
        return None

    async def get_by_email(self, email):
        for user in self._rows.values():
            if user.email == email:
                return copy.deepcopy(user)
        return None

    async def get_many(self, user_ids):
        return {
            uid: copy.deepcopy(self._rows[uid])
            for uid in set(user_ids) if uid in self._rows
        }

    async def add(self, user):
        self._rows[user.id] = copy.deepcopy(user)

    async def update(self, user):
        if user.id in self._rows:
            self._rows[user.id] = copy.deepcopy(user)

    async def delete_all(self):
        self._rows.clear()


class MemoryArticleRepository:
    def __init__(self, store: "MemoryStore"):
        self._store = store

    @property
    def _rows(self) -> dict[ArticleId, Article]:
        return self._store.tables.articles

    async def get_by_slug(self, slug):
        for article in self._rows.values():
            if article.slug == slug:
                return copy.deepcopy(article)
        return None

    async def slug_taken(self, slug, exclude_id=None):
        return any(
            a.slug == slug and a.id != exclude_id for a in self._rows.values()
        )

    async def add(self, article):
        self._rows[article.id] = copy.deepcopy(article)
        self._store.tables.tags.update(article.tag_list)

    async def update(self, article):
        if article.id in self._rows:
            self._rows[article.id] = copy.deepcopy(article)
            self._store.tables.tags.update(article.tag_list)

    async def delete(self, article_id):
        tables = self._store.tables
        tables.articles.pop(article_id, None)
        tables.comments = {
            cid: c for cid, c in tables.comments.items() if c.article_id != article_id
        }
        tables.favorites = {f for f in tables.favorites if f[1] != article_id}

    async def list_matching(self, criteria: ArticleFilter):
        tables = self._store.tables
        matches = list(tables.articles.values())
        if criteria.author_ids is not None:
            matches = [a for a in matches if a.author_id in criteria.author_ids]
        if criteria.author_id is not None:
            matches = [a for a in matches if a.author_id == criteria.author_id]
        if criteria.tag is not None:
            matches = [a for a in matches if criteria.tag in a.tag_list]
        if criteria.favorited_by is not None:
            matches = [
                a for a in matches
                if (criteria.favorited_by, a.id) in tables.favorites
            ]
        # Insertion order breaks created_at ties
        matches = list(reversed(matches))
        matches.sort(key=lambda a: a.created_at, reverse=True)
        page = matches[criteria.offset:criteria.offset + criteria.limit]
        return [copy.deepcopy(a) for a in page], len(matches)

    async def delete_all(self):
        self._rows.clear()


class MemoryCommentRepository:
    def __init__(self, store: "MemoryStore"):
        self._store = store

    async def get(self, comment_id):
        comment = self._store.tables.comments.get(comment_id)
        return copy.deepcopy(comment) if comment else None

    async def list_for_article(self, article_id):
        comments = [
            c for c in self._store.tables.comments.values()
            if c.article_id == article_id
        ]
        return [copy.deepcopy(c) for c in sorted(comments, key=lambda c: c.created_at)]

    async def add(self, comment):
        self._store.tables.comments[comment.id] = copy.deepcopy(comment)

    async def delete(self, comment_id):
        self._store.tables.comments.pop(comment_id, None)

    async def delete_all(self):
        self._store.tables.comments.clear()


class MemoryTagRepository:
    def __init__(self, store: "MemoryStore"):
        self._store = store

    async def all(self):
        return [Tag(name=n) for n in sorted(self._store.tables.tags)]

    async def delete_all(self):
        self._store.tables.tags.clear()


class MemoryEdgeStore:
    def __init__(self, store: "MemoryStore"):
        self._store = store

    @property
    def _follows(self):
        return self._store.tables.follows

    @property
    def _favorites(self):
        return self._store.tables.favorites

    async def has_follow(self, follower_id, followed_id):
        return (follower_id, followed_id) in self._follows

    async def add_follow(self, follower_id, followed_id):
        self._follows.add((follower_id, followed_id))

    async def remove_follow(self, follower_id, followed_id):
        if (follower_id, followed_id) not in self._follows:
            return False
        self._follows.discard((follower_id, followed_id))
        return True

    async def followed_among(self, follower_id, candidates: Iterable[UserId]):
        return {c for c in candidates if (follower_id, c) in self._follows}

    async def followed_ids(self, follower_id):
        return {followed for follower, followed in self._follows if follower == follower_id}

    async def has_favorite(self, user_id, article_id):
        return (user_id, article_id) in self._favorites

    async def add_favorite(self, user_id, article_id):
        self._favorites.add((user_id, article_id))

    async def remove_favorite(self, user_id, article_id):
        if (user_id, article_id) not in self._favorites:
            return False
        self._favorites.discard((user_id, article_id))
        return True

    async def favorited_among(self, user_id, article_ids):
        return {a for a in article_ids if (user_id, a) in self._favorites}

    async def count_favorites(self, article_ids):
        ids = set(article_ids)
        counts = {a: 0 for a in ids}
        for _, article_id in self._favorites:
            if article_id in counts:
                counts[article_id] += 1
        return counts

    async def delete_all(self):
        self._favorites.clear()
        self._follows.clear()


class MemoryStore:
    """Unit of work over plain dicts with snapshot rollback."""

    def __init__(self):
        self.tables = _Tables()
        self._committed = copy.deepcopy(self.tables)
        self.commits = 0
        self.rollbacks = 0
        self.users = MemoryUserRepository(self)
        self.articles = MemoryArticleRepository(self)
        self.comments = MemoryCommentRepository(self)
        self.tags = MemoryTagRepository(self)
        self.edges = MemoryEdgeStore(self)

    async def commit(self):
        self._committed = copy.deepcopy(self.tables)
        self.commits += 1

    async def rollback(self):
        self.tables = copy.deepcopy(self._committed)
        self.rollbacks += 1
