"""Relationship Registry - owns Follow (user -> user) and Favorite (user -> article) edges.

Invariants:
    - At most one Follow edge per ordered (follower, followed) pair
    - At most one Favorite edge per (user, article) pair
    - follow is idempotent; following yourself is INVALID_STATE
    - unfollow without an edge is INVALID_STATE ("is not being followed")
    - unfavorite without an edge is a silent success
    - favorites_count is COUNT of Favorite edges, so it never goes negative
    - view_context resolves every viewer-relative flag in a fixed number of queries

Design Decisions:
    - Edges kept as id pairs behind EdgeStore: no entity holds a collection of
      followers or favorites, so there are no object cycles to keep in sync
    - Existence is checked before insert so the common path needs no exception;
      the store's ON CONFLICT DO NOTHING covers a concurrent duplicate
"""

import logging
from typing import Iterable

from conduit.core.domain_types import UserId, ArticleId, EdgeType, ErrorKind
from conduit.core.repository_protocols import Store
from conduit.core.result import Result
from conduit.core.view_assembly import ViewContext

logger = logging.getLogger(__name__)


class RelationshipRegistry:
    """Follow/favorite edges plus the per-request ViewContext built from them."""

    def __init__(self, store: Store):
        self._edges = store.edges

    # ─── Follow ─────────────────────────────────────────────────

    async def follow(self, follower_id: UserId, followed_id: UserId) -> Result[None]:
        if follower_id == followed_id:
            return Result.fail(
                ErrorKind.INVALID_STATE, "cannot follow yourself", field="username",
            )
        if await self._edges.has_follow(follower_id, followed_id):
            return Result.ok()
        await self._edges.add_follow(follower_id, followed_id)
        logger.info(
            f"{EdgeType.FOLLOW.value} edge added",
            extra={"user_id": follower_id},
        )
        return Result.ok()

    async def unfollow(self, follower_id: UserId, followed_id: UserId) -> Result[None]:
        removed = await self._edges.remove_follow(follower_id, followed_id)
        if not removed:
            return Result.fail(
                ErrorKind.INVALID_STATE, "is not being followed", field="username",
            )
        logger.info(
            f"{EdgeType.FOLLOW.value} edge removed",
            extra={"user_id": follower_id},
        )
        return Result.ok()

    async def is_following(self, follower_id: UserId, followed_id: UserId) -> bool:
        return await self._edges.has_follow(follower_id, followed_id)

    async def following_ids(self, follower_id: UserId) -> set[UserId]:
        return await self._edges.followed_ids(follower_id)

    # ─── Favorite ───────────────────────────────────────────────

    async def favorite(self, user_id: UserId, article_id: ArticleId) -> Result[None]:
        if await self._edges.has_favorite(user_id, article_id):
            return Result.ok()
        await self._edges.add_favorite(user_id, article_id)
        logger.info(
            f"{EdgeType.FAVORITE.value} edge added",
            extra={"user_id": user_id},
        )
        return Result.ok()

    async def unfavorite(self, user_id: UserId, article_id: ArticleId) -> Result[None]:
        if await self._edges.remove_favorite(user_id, article_id):
            logger.info(
                f"{EdgeType.FAVORITE.value} edge removed",
                extra={"user_id": user_id},
            )
        return Result.ok()

    async def has_favorited(self, user_id: UserId, article_id: ArticleId) -> bool:
        return await self._edges.has_favorite(user_id, article_id)

    async def favorites_count(self, article_id: ArticleId) -> int:
        counts = await self._edges.count_favorites([article_id])
        return counts.get(article_id, 0)

    async def favorites_counts(
        self, article_ids: Iterable[ArticleId],
    ) -> dict[ArticleId, int]:
        return await self._edges.count_favorites(article_ids)

    # ─── View context ───────────────────────────────────────────

    async def view_context(
        self,
        viewer_id: UserId | None,
        author_ids: Iterable[UserId] = (),
        article_ids: Iterable[ArticleId] = (),
    ) -> ViewContext:
        """Resolve following/favorited sets and favorite counts for one response."""
        author_ids = list(author_ids)
        article_ids = list(article_ids)
        counts = (
            await self._edges.count_favorites(article_ids) if article_ids else {}
        )
        if viewer_id is None:
            return ViewContext.anonymous(counts)
        following = (
            await self._edges.followed_among(viewer_id, author_ids)
            if author_ids else set()
        )
        favorited = (
            await self._edges.favorited_among(viewer_id, article_ids)
            if article_ids else set()
        )
        return ViewContext(
            viewer_id=viewer_id,
            following=frozenset(following),
            favorited=frozenset(favorited),
            favorites_counts=counts,
        )
