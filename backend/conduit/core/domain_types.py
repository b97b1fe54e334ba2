"""Domain Types - identity wrappers and enums shared across the codebase.

Invariants:
    - UserId, ArticleId, CommentId wrap UUIDs; domain logic never passes bare UUIDs
    - Every error outcome is one ErrorKind member; no raw string matching
    - Length limits live here and nowhere else

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ArticleId = NewType("ArticleId", UUID)
CommentId = NewType("CommentId", UUID)


# ─── Limits ──────────────────────────────────────────────────────

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6
BIO_MAX_LENGTH = 1000
IMAGE_URL_MAX_LENGTH = 500
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 500
SLUG_MAX_LENGTH = 250
TAG_MAX_LENGTH = 50

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

DEFAULT_BIO = "I work at statefarm"


# ─── Enums ───────────────────────────────────────────────────────

class ErrorKind(str, Enum):
    """Outcome categories returned by handlers; transport maps each to a status."""
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    VALIDATION = "validation"
    MISSING_ENTITY = "missing_entity"
    FORBIDDEN = "forbidden"
    UNAUTHORIZED = "unauthorized"
    UNEXPECTED = "unexpected"


class EdgeType(str, Enum):
    """Relationship edge kinds held by the registry."""
    FOLLOW = "follow"
    FAVORITE = "favorite"
