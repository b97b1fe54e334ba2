"""View Assembly - pure mapping from entities plus a viewer context to response views.

Invariants:
    - No function here performs IO; every relationship flag comes from ViewContext
    - An absent viewer (viewer_id is None) never sees following=True or favorited=True
    - favorites_count is read from ViewContext.favorites_counts (the registry's COUNT),
      never recomputed from a collection
    - map_comment delegates author mapping to map_author with the same context

Design Decisions:
    - ViewContext is built once per request by RelationshipRegistry.view_context,
      so listing N articles costs a fixed number of queries
    - Self-authorship needs no special case: self-follow edges cannot exist, and a
      self-favorite edge reports favorited=True like any other edge
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from conduit.core.domain_types import UserId, ArticleId
from conduit.core.entities import User, Article, Comment
from conduit.schemas.views import (
    AuthorView, ProfileView, ArticleView, CommentView, UserView,
)


@dataclass(frozen=True)
class ViewContext:
    """Viewer identity plus the relationship facts needed to render views."""
    viewer_id: UserId | None = None
    following: frozenset[UserId] = frozenset()
    favorited: frozenset[ArticleId] = frozenset()
    favorites_counts: Mapping[ArticleId, int] = field(default_factory=dict)

    @classmethod
    def anonymous(
        cls, favorites_counts: Mapping[ArticleId, int] | None = None,
    ) -> "ViewContext":
        return cls(favorites_counts=dict(favorites_counts or {}))

    def is_following(self, user_id: UserId) -> bool:
        return self.viewer_id is not None and user_id in self.following

    def has_favorited(self, article_id: ArticleId) -> bool:
        return self.viewer_id is not None and article_id in self.favorited

    def favorites_count(self, article_id: ArticleId) -> int:
        return self.favorites_counts.get(article_id, 0)


def map_author(user: User, ctx: ViewContext) -> AuthorView:
    return AuthorView(
        username=user.username,
        bio=user.bio or "",
        image=user.image,
        following=ctx.is_following(user.id),
    )


def map_profile(user: User, ctx: ViewContext) -> ProfileView:
    return ProfileView(**map_author(user, ctx).model_dump())


def map_article(article: Article, author: User, ctx: ViewContext) -> ArticleView:
    return ArticleView(
        slug=article.slug,
        title=article.title,
        description=article.description,
        body=article.body,
        tag_list=list(article.tag_list),
        created_at=article.created_at,
        updated_at=article.updated_at,
        favorited=ctx.has_favorited(article.id),
        favorites_count=ctx.favorites_count(article.id),
        author=map_author(author, ctx),
    )


def map_articles(
    articles: Iterable[Article],
    authors: Mapping[UserId, User],
    ctx: ViewContext,
) -> list[ArticleView]:
    """Map a page of articles. Every author_id must be present in authors."""
    return [map_article(a, authors[a.author_id], ctx) for a in articles]


def map_comment(comment: Comment, author: User, ctx: ViewContext) -> CommentView:
    return CommentView(
        id=comment.id,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        body=comment.body,
        author=map_author(author, ctx),
    )


def map_user(user: User, token: str) -> UserView:
    """Current-user view; carries the auth token, no relationship flags."""
    return UserView(
        email=user.email,
        token=token,
        username=user.username,
        bio=user.bio or "",
        image=user.image,
    )
