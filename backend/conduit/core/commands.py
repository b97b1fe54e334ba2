"""Commands & Queries - immutable request objects routed by the dispatcher.

Invariants:
    - Commands mutate state and are committed on success; queries never mutate
    - Every object is a frozen dataclass holding already-parsed values (no HTTP types)
    - viewer_id / user_id is None only where anonymous access is allowed

Design Decisions:
    - Explicit classes over string names: dispatcher routes on type, mypy checks fields
"""

from dataclasses import dataclass

from conduit.core.domain_types import UserId, CommentId


class Command:
    """Marker base: mutating request, committed by the dispatcher on success."""


class Query:
    """Marker base: read-only request."""


# ─── Identity ────────────────────────────────────────────────────

@dataclass(frozen=True)
class RegisterUser(Command):
    email: str
    username: str
    password: str


@dataclass(frozen=True)
class LoginUser(Query):
    email: str
    password: str


@dataclass(frozen=True)
class GetCurrentUser(Query):
    user_id: UserId


@dataclass(frozen=True)
class UpdateUser(Command):
    user_id: UserId
    email: str | None = None
    username: str | None = None
    password: str | None = None
    bio: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class InviteUser(Command):
    email: str
    password: str
    inviter_id: UserId


# ─── Profiles ────────────────────────────────────────────────────

@dataclass(frozen=True)
class GetProfile(Query):
    username: str
    viewer_id: UserId | None = None


@dataclass(frozen=True)
class FollowUser(Command):
    username: str
    viewer_id: UserId


@dataclass(frozen=True)
class UnfollowUser(Command):
    username: str
    viewer_id: UserId


# ─── Articles ────────────────────────────────────────────────────

@dataclass(frozen=True)
class CreateArticle(Command):
    title: str
    description: str
    body: str
    author_id: UserId
    tag_list: tuple[str, ...] = ()


@dataclass(frozen=True)
class GetArticle(Query):
    slug: str
    viewer_id: UserId | None = None


@dataclass(frozen=True)
class UpdateArticle(Command):
    slug: str
    user_id: UserId
    title: str | None = None
    description: str | None = None
    body: str | None = None


@dataclass(frozen=True)
class DeleteArticle(Command):
    slug: str
    user_id: UserId


@dataclass(frozen=True)
class ListArticles(Query):
    tag: str | None = None
    author: str | None = None
    favorited: str | None = None
    limit: int = 20
    offset: int = 0
    viewer_id: UserId | None = None


@dataclass(frozen=True)
class GetFeed(Query):
    user_id: UserId
    limit: int = 20
    offset: int = 0


@dataclass(frozen=True)
class FavoriteArticle(Command):
    slug: str
    user_id: UserId


@dataclass(frozen=True)
class UnfavoriteArticle(Command):
    slug: str
    user_id: UserId


# ─── Comments ────────────────────────────────────────────────────

@dataclass(frozen=True)
class AddComment(Command):
    slug: str
    body: str
    author_id: UserId


@dataclass(frozen=True)
class GetComments(Query):
    slug: str
    viewer_id: UserId | None = None


@dataclass(frozen=True)
class DeleteComment(Command):
    slug: str
    comment_id: CommentId
    user_id: UserId


# ─── Tags & maintenance ──────────────────────────────────────────

@dataclass(frozen=True)
class ListTags(Query):
    pass


@dataclass(frozen=True)
class WipeAllData(Command):
    pass
