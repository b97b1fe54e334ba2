"""Article Handlers - article CRUD, listing, feed and favorites.

Invariants:
    - Only the author may update or delete an article (FORBIDDEN otherwise)
    - Slugs are unique: a colliding create or retitle fails on field "slug"
    - limit is capped at max_page_size; results are newest first with the total
      count taken before paging
    - favorite/unfavorite: missing article is NOT_FOUND, missing user is MISSING_ENTITY
    - Every returned view is mapped with one ViewContext built after the mutation

Design Decisions:
    - Unknown author/favorited usernames in a listing yield an empty page, not an error
    - Feed is a listing restricted to the viewer's followed authors
"""

from conduit.core.commands import (
    CreateArticle, GetArticle, UpdateArticle, DeleteArticle,
    ListArticles, GetFeed, FavoriteArticle, UnfavoriteArticle,
)
from conduit.core.domain_types import UserId, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from conduit.core.entities import Article, EntityInvariantError
from conduit.core.repository_protocols import ArticleFilter, Store
from conduit.core.result import Result, not_found, missing_entity, forbidden, invalid
from conduit.core.view_assembly import map_article, map_articles
from conduit.schemas.views import ArticleView, ArticleListEnvelope
from conduit.services.relationship_registry import RelationshipRegistry


class ArticleHandlers:
    """Articles: create/read/update/delete, listings and favorite edges."""

    def __init__(
        self,
        store: Store,
        registry: RelationshipRegistry,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self.store = store
        self.registry = registry
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    # ─── CRUD ───────────────────────────────────────────────────

    async def create_article(self, command: CreateArticle) -> Result[ArticleView]:
        author = await self.store.users.get(command.author_id)
        if author is None:
            return not_found("Author not found")
        try:
            article = Article(
                title=command.title,
                description=command.description,
                body=command.body,
                author_id=author.id,
                tag_list=list(command.tag_list),
            )
        except EntityInvariantError as e:
            return invalid(e.field, e.message)
        if await self.store.articles.slug_taken(article.slug):
            return invalid("slug", "has already been taken")

        await self.store.articles.add(article)
        return Result.ok(await self._view(article, author.id, author))

    async def get_article(self, query: GetArticle) -> Result[ArticleView]:
        article = await self.store.articles.get_by_slug(query.slug)
        if article is None:
            return not_found(f"Article '{query.slug}' not found")
        author = await self.store.users.get(article.author_id)
        if author is None:
            return missing_entity("User", article.author_id)
        return Result.ok(await self._view(article, query.viewer_id, author))

    async def update_article(self, command: UpdateArticle) -> Result[ArticleView]:
        article = await self.store.articles.get_by_slug(command.slug)
        if article is None:
            return not_found(f"Article '{command.slug}' not found")
        if article.author_id != command.user_id:
            return forbidden("You are not the author of this article")
        if command.title is None and command.description is None and command.body is None:
            return invalid("article", "must include at least one field to update")

        previous_slug = article.slug
        try:
            article.update(
                title=command.title,
                description=command.description,
                body=command.body,
            )
        except EntityInvariantError as e:
            return invalid(e.field, e.message)
        if article.slug != previous_slug and await self.store.articles.slug_taken(
            article.slug, exclude_id=article.id,
        ):
            return invalid("slug", "has already been taken")

        await self.store.articles.update(article)
        author = await self.store.users.get(article.author_id)
        return Result.ok(await self._view(article, command.user_id, author))

    async def delete_article(self, command: DeleteArticle) -> Result[None]:
        article = await self.store.articles.get_by_slug(command.slug)
        if article is None:
            return not_found(f"Article '{command.slug}' not found")
        if article.author_id != command.user_id:
            return forbidden("You are not the author of this article")
        await self.store.articles.delete(article.id)
        return Result.ok()

    # ─── Listings ───────────────────────────────────────────────

    async def list_articles(self, query: ListArticles) -> Result[ArticleListEnvelope]:
        author_id = None
        if query.author is not None:
            author = await self.store.users.get_by_username(query.author)
            if author is None:
                return Result.ok(ArticleListEnvelope(articles=[], articles_count=0))
            author_id = author.id
        favorited_by = None
        if query.favorited is not None:
            fan = await self.store.users.get_by_username(query.favorited)
            if fan is None:
                return Result.ok(ArticleListEnvelope(articles=[], articles_count=0))
            favorited_by = fan.id

        criteria = ArticleFilter(
            tag=query.tag,
            author_id=author_id,
            favorited_by=favorited_by,
            limit=self._clamp(query.limit),
            offset=max(query.offset, 0),
        )
        return Result.ok(await self._page(criteria, query.viewer_id))

    async def get_feed(self, query: GetFeed) -> Result[ArticleListEnvelope]:
        user = await self.store.users.get(query.user_id)
        if user is None:
            return not_found("Current user not found")
        followed = await self.registry.following_ids(user.id)
        criteria = ArticleFilter(
            author_ids=frozenset(followed),
            limit=self._clamp(query.limit),
            offset=max(query.offset, 0),
        )
        return Result.ok(await self._page(criteria, user.id))

    # ─── Favorites ──────────────────────────────────────────────

    async def favorite_article(self, command: FavoriteArticle) -> Result[ArticleView]:
        article = await self.store.articles.get_by_slug(command.slug)
        if article is None:
            return not_found(f"Article '{command.slug}' not found")
        user = await self.store.users.get(command.user_id)
        if user is None:
            return missing_entity("User", command.user_id)

        outcome = await self.registry.favorite(user.id, article.id)
        if not outcome.is_ok:
            return Result.from_failure(outcome.error)
        author = await self.store.users.get(article.author_id)
        return Result.ok(await self._view(article, user.id, author))

    async def unfavorite_article(self, command: UnfavoriteArticle) -> Result[ArticleView]:
        article = await self.store.articles.get_by_slug(command.slug)
        if article is None:
            return not_found(f"Article '{command.slug}' not found")
        user = await self.store.users.get(command.user_id)
        if user is None:
            return missing_entity("User", command.user_id)

        outcome = await self.registry.unfavorite(user.id, article.id)
        if not outcome.is_ok:
            return Result.from_failure(outcome.error)
        author = await self.store.users.get(article.author_id)
        return Result.ok(await self._view(article, user.id, author))

    # ─── Helpers ────────────────────────────────────────────────

    def _clamp(self, limit: int | None) -> int:
        if limit is None or limit <= 0:
            return self.default_page_size
        return min(limit, self.max_page_size)

    async def _view(self, article: Article, viewer_id: UserId | None, author) -> ArticleView:
        ctx = await self.registry.view_context(viewer_id, [author.id], [article.id])
        return map_article(article, author, ctx)

    async def _page(
        self, criteria: ArticleFilter, viewer_id: UserId | None,
    ) -> ArticleListEnvelope:
        articles, total = await self.store.articles.list_matching(criteria)
        authors = await self.store.users.get_many(a.author_id for a in articles)
        ctx = await self.registry.view_context(
            viewer_id, authors.keys(), [a.id for a in articles],
        )
        return ArticleListEnvelope(
            articles=map_articles(articles, authors, ctx),
            articles_count=total,
        )
