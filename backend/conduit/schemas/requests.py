"""Request Schemas - RealWorld request envelopes validated at the HTTP boundary.

Invariants:
    - Bodies are wrapped under their resource key ({"user": ...}, {"article": ...})
    - Required fields are non-empty strings; domain rules (uniqueness, length limits)
      are enforced by handlers and entities, not here
"""

from pydantic import Field

from conduit.schemas.base import CamelModel


# ─── Identity ────────────────────────────────────────────────────

class RegisterUserData(CamelModel):
    email: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterUserRequest(CamelModel):
    user: RegisterUserData


class LoginUserData(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginUserRequest(CamelModel):
    user: LoginUserData


class UpdateUserData(CamelModel):
    email: str | None = None
    username: str | None = None
    password: str | None = None
    bio: str | None = None
    image: str | None = None


class UpdateUserRequest(CamelModel):
    user: UpdateUserData


class InviteUserRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


# ─── Articles & comments ─────────────────────────────────────────

class CreateArticleData(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    body: str = Field(min_length=1)
    tag_list: list[str] = Field(default_factory=list)


class CreateArticleRequest(CamelModel):
    article: CreateArticleData


class UpdateArticleData(CamelModel):
    title: str | None = None
    description: str | None = None
    body: str | None = None


class UpdateArticleRequest(CamelModel):
    article: UpdateArticleData


class CreateCommentData(CamelModel):
    body: str = Field(min_length=1)


class CreateCommentRequest(CamelModel):
    comment: CreateCommentData
