"""Domain Entities - plain data holders with invariant-enforcing constructors and mutators.

Invariants:
    - Entities reference each other by id only (author_id, article_id); no object cycles
    - Username is 2-100 chars; title, description and body are never blank
    - Article.slug is always derived from the current title
    - Article.tag_list is an ordered set: blank names dropped, duplicates removed, order kept
    - Violations raise EntityInvariantError (a ValueError) carrying the offending field

Design Decisions:
    - Dataclasses with __post_init__ guards: pure, no IO, testable without mocks
    - Relationship edges (follow, favorite) are NOT stored on entities; the
      relationship registry owns them
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable
from uuid import uuid4

from conduit.core.domain_types import (
    UserId, ArticleId, CommentId,
    USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH, EMAIL_MAX_LENGTH,
    BIO_MAX_LENGTH, IMAGE_URL_MAX_LENGTH, TITLE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH, SLUG_MAX_LENGTH, TAG_MAX_LENGTH, DEFAULT_BIO,
)

_SLUG_STRIPPED_CHARS = ".,!?'\""


class EntityInvariantError(ValueError):
    """Raised when a constructor or mutator would break an entity invariant."""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"{field_name} {message}")
        self.field = field_name
        self.message = message


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_slug(title: str) -> str:
    """Lowercase, spaces to dashes, punctuation removed."""
    slug = title.strip().lower().replace(" ", "-")
    for ch in _SLUG_STRIPPED_CHARS:
        slug = slug.replace(ch, "")
    return slug[:SLUG_MAX_LENGTH]


def normalize_tag_list(names: Iterable[str] | None) -> list[str]:
    """Strip names, drop blanks and duplicates, keep first-seen order."""
    seen: set[str] = set()
    tags: list[str] = []
    for raw in names or ():
        name = raw.strip()
        if not name or name in seen:
            continue
        if len(name) > TAG_MAX_LENGTH:
            raise EntityInvariantError(
                "tagList", f"cannot exceed {TAG_MAX_LENGTH} characters",
            )
        seen.add(name)
        tags.append(name)
    return tags


def _require_text(field_name: str, value: str, max_length: int | None = None) -> str:
    if value is None or not value.strip():
        raise EntityInvariantError(field_name, "can't be blank")
    if max_length is not None and len(value) > max_length:
        raise EntityInvariantError(
            field_name, f"cannot exceed {max_length} characters",
        )
    return value


def _check_username(username: str) -> str:
    _require_text("username", username)
    if len(username) < USERNAME_MIN_LENGTH:
        raise EntityInvariantError(
            "username", f"must be at least {USERNAME_MIN_LENGTH} characters",
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise EntityInvariantError(
            "username", f"cannot exceed {USERNAME_MAX_LENGTH} characters",
        )
    return username


def _check_optional_length(field_name: str, value: str | None, max_length: int) -> None:
    if value is not None and len(value) > max_length:
        raise EntityInvariantError(
            field_name, f"cannot exceed {max_length} characters",
        )


@dataclass
class User:
    """Registered identity. Owns no edges; see RelationshipRegistry."""
    username: str
    email: str
    password_hash: str
    bio: str = DEFAULT_BIO
    image: str | None = None
    id: UserId = field(default_factory=lambda: UserId(uuid4()))
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        _check_username(self.username)
        _require_text("email", self.email, EMAIL_MAX_LENGTH)
        _require_text("password", self.password_hash)
        self.bio = self.bio or ""
        _check_optional_length("bio", self.bio, BIO_MAX_LENGTH)
        _check_optional_length("image", self.image, IMAGE_URL_MAX_LENGTH)

    def update(
        self,
        *,
        email: str | None = None,
        username: str | None = None,
        password_hash: str | None = None,
        bio: str | None = None,
        image: str | None = None,
    ) -> None:
        """Apply the provided fields; None leaves a field unchanged."""
        if email is not None:
            self.email = _require_text("email", email, EMAIL_MAX_LENGTH)
        if username is not None:
            self.username = _check_username(username)
        if password_hash is not None:
            self.password_hash = _require_text("password", password_hash)
        if bio is not None:
            _check_optional_length("bio", bio, BIO_MAX_LENGTH)
            self.bio = bio
        if image is not None:
            _check_optional_length("image", image, IMAGE_URL_MAX_LENGTH)
            self.image = image or None
        self.updated_at = utcnow()


@dataclass(frozen=True)
class Tag:
    """Tag identity is its name."""
    name: str


@dataclass
class Article:
    """Published article. Favorites are edges, never a stored count."""
    title: str
    description: str
    body: str
    author_id: UserId
    tag_list: list[str] = field(default_factory=list)
    slug: str = field(init=False, default="")
    id: ArticleId = field(default_factory=lambda: ArticleId(uuid4()))
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        _require_text("title", self.title, TITLE_MAX_LENGTH)
        _require_text("description", self.description, DESCRIPTION_MAX_LENGTH)
        _require_text("body", self.body)
        self.slug = generate_slug(self.title)
        if not self.slug:
            raise EntityInvariantError("title", "must contain a letter or digit")
        self.tag_list = normalize_tag_list(self.tag_list)

    def update(
        self,
        *,
        title: str | None = None,
        description: str | None = None,
        body: str | None = None,
    ) -> None:
        """Apply the provided fields; a new title re-derives the slug."""
        if title is not None:
            _require_text("title", title, TITLE_MAX_LENGTH)
            slug = generate_slug(title)
            if not slug:
                raise EntityInvariantError("title", "must contain a letter or digit")
            self.title = title
            self.slug = slug
        if description is not None:
            self.description = _require_text(
                "description", description, DESCRIPTION_MAX_LENGTH,
            )
        if body is not None:
            self.body = _require_text("body", body)
        self.updated_at = utcnow()


@dataclass
class Comment:
    """Comment on an article, owned by its author."""
    body: str
    author_id: UserId
    article_id: ArticleId
    id: CommentId = field(default_factory=lambda: CommentId(uuid4()))
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        _require_text("body", self.body)

    def is_written_by(self, user_id: UserId) -> bool:
        return self.author_id == user_id
