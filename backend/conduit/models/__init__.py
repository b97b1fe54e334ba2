"""ORM Models - SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Edges (follows, favorites) are rows keyed by their id pair

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from conduit.models.user import UserRow  # noqa: F401
from conduit.models.follow import FollowRow  # noqa: F401
from conduit.models.article import ArticleRow  # noqa: F401
from conduit.models.tag import TagRow, ArticleTagRow  # noqa: F401
from conduit.models.favorite import FavoriteRow  # noqa: F401
from conduit.models.comment import CommentRow  # noqa: F401
