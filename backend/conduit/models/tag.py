"""Tag ORM - unique tag names and the ordered article <-> tag association.

Invariants:
    - Tag names are unique; a tag row is shared by every article using it
    - article_tags.position preserves the article's tagList order
"""

import uuid

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from conduit.core.domain_types import TAG_MAX_LENGTH
from conduit.db.base import Base


class TagRow(Base):
    __tablename__ = "tags"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(TAG_MAX_LENGTH), nullable=False, unique=True, index=True,
    )


class ArticleTagRow(Base):
    __tablename__ = "article_tags"

    article_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("articles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True, index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
