"""Response Views - externally shaped representations produced by view assembly.

Invariants:
    - Views carry resolved viewer-relative flags (following, favorited); they never query
    - Envelopes wrap views under the RealWorld top-level keys (user, profile, article, ...)
"""

from datetime import datetime
from uuid import UUID

from conduit.schemas.base import CamelModel


class AuthorView(CamelModel):
    username: str
    bio: str
    image: str | None = None
    following: bool = False


class ProfileView(AuthorView):
    """Same shape as AuthorView; returned by the profile endpoints."""


class ArticleView(CamelModel):
    slug: str
    title: str
    description: str
    body: str
    tag_list: list[str]
    created_at: datetime
    updated_at: datetime
    favorited: bool
    favorites_count: int
    author: AuthorView


class CommentView(CamelModel):
    id: UUID
    created_at: datetime
    updated_at: datetime
    body: str
    author: AuthorView


class UserView(CamelModel):
    email: str
    token: str
    username: str
    bio: str
    image: str | None = None


# ─── Envelopes ───────────────────────────────────────────────────

class UserEnvelope(CamelModel):
    user: UserView


class ProfileEnvelope(CamelModel):
    profile: ProfileView


class ArticleEnvelope(CamelModel):
    article: ArticleView


class ArticleListEnvelope(CamelModel):
    articles: list[ArticleView]
    articles_count: int


class CommentEnvelope(CamelModel):
    comment: CommentView


class CommentListEnvelope(CamelModel):
    comments: list[CommentView]


class TagListEnvelope(CamelModel):
    tags: list[str]
