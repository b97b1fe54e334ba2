"""SQL Store - SQLAlchemy implementations of the repository Protocols.

Invariants:
    - Every method works on the injected AsyncSession; nothing here commits
      except SqlStore.commit (called by the dispatcher)
    - Rows are converted to domain entities at this boundary; no ORM object escapes
    - Edge inserts are INSERT ... ON CONFLICT DO NOTHING: a concurrent duplicate
      follow/favorite is the same state, not an error
    - Deleting an article removes its comments, favorites and tag links explicitly
      (SQLite does not enforce ON DELETE CASCADE without a pragma)

Design Decisions:
    - Parent rows flushed before child rows: no relationship() mappings, so the
      unit of work is not asked to infer insert order
    - favorites_count is always a COUNT(*) over favorites
"""

import uuid
from typing import Iterable

from sqlalchemy import select, delete, func, insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.core.domain_types import UserId, ArticleId, CommentId
from conduit.core.entities import User, Article, Comment, Tag
from conduit.core.repository_protocols import ArticleFilter
from conduit.models.user import UserRow
from conduit.models.follow import FollowRow
from conduit.models.article import ArticleRow
from conduit.models.tag import TagRow, ArticleTagRow
from conduit.models.favorite import FavoriteRow
from conduit.models.comment import CommentRow


# ─── Row → entity ───────────────────────────────────────────────

def _to_user(row: UserRow) -> User:
    return User(
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        bio=row.bio,
        image=row.image,
        id=UserId(row.id),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_article(row: ArticleRow, tags: list[str]) -> Article:
    return Article(
        title=row.title,
        description=row.description,
        body=row.body,
        author_id=UserId(row.author_id),
        tag_list=tags,
        id=ArticleId(row.id),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_comment(row: CommentRow) -> Comment:
    return Comment(
        body=row.body,
        author_id=UserId(row.author_id),
        article_id=ArticleId(row.article_id),
        id=CommentId(row.id),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ─── Users ──────────────────────────────────────────────────────

class SqlUserRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, user_id: UserId) -> User | None:
        row = await self._db.get(UserRow, user_id)
        return _to_user(row) if row else None

    async def get_by_username(self, username: str) -> User | None:
        result = await self._db.execute(
            select(UserRow).where(UserRow.username == username),
        )
        row = result.scalar_one_or_none()
        return _to_user(row) if row else None

    async def get_by_email(self, email: str) -> User | None:
        result = await self._db.execute(
            select(UserRow).where(UserRow.email == email),
        )
        row = result.scalar_one_or_none()
        return _to_user(row) if row else None

    async def get_many(self, user_ids: Iterable[UserId]) -> dict[UserId, User]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        result = await self._db.execute(
            select(UserRow).where(UserRow.id.in_(ids)),
        )
        return {UserId(row.id): _to_user(row) for row in result.scalars()}

    async def add(self, user: User) -> None:
        self._db.add(UserRow(
            id=user.id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            bio=user.bio,
            image=user.image,
            created_at=user.created_at,
            updated_at=user.updated_at,
        ))
        await self._db.flush()

    async def update(self, user: User) -> None:
        row = await self._db.get(UserRow, user.id)
        if row is None:
            return
        row.username = user.username
        row.email = user.email
        row.password_hash = user.password_hash
        row.bio = user.bio
        row.image = user.image
        row.updated_at = user.updated_at
        await self._db.flush()

    async def delete_all(self) -> None:
        await self._db.execute(delete(UserRow))


# ─── Articles & tags ────────────────────────────────────────────

class SqlArticleRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_by_slug(self, slug: str) -> Article | None:
        result = await self._db.execute(
            select(ArticleRow).where(ArticleRow.slug == slug),
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        tags = await self._tags_for([row.id])
        return _to_article(row, tags.get(row.id, []))

    async def slug_taken(
        self, slug: str, exclude_id: ArticleId | None = None,
    ) -> bool:
        stmt = select(ArticleRow.id).where(ArticleRow.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(ArticleRow.id != exclude_id)
        result = await self._db.execute(stmt.limit(1))
        return result.first() is not None

    async def add(self, article: Article) -> None:
        self._db.add(ArticleRow(
            id=article.id,
            slug=article.slug,
            title=article.title,
            description=article.description,
            body=article.body,
            author_id=article.author_id,
            created_at=article.created_at,
            updated_at=article.updated_at,
        ))
        await self._db.flush()
        await self._link_tags(article.id, article.tag_list)

    async def update(self, article: Article) -> None:
        row = await self._db.get(ArticleRow, article.id)
        if row is None:
            return
        row.slug = article.slug
        row.title = article.title
        row.description = article.description
        row.body = article.body
        row.updated_at = article.updated_at
        await self._db.execute(
            delete(ArticleTagRow).where(ArticleTagRow.article_id == article.id),
        )
        await self._db.flush()
        await self._link_tags(article.id, article.tag_list)

    async def delete(self, article_id: ArticleId) -> None:
        for model in (CommentRow, FavoriteRow, ArticleTagRow):
            await self._db.execute(
                delete(model).where(model.article_id == article_id),
            )
        await self._db.execute(delete(ArticleRow).where(ArticleRow.id == article_id))

    async def list_matching(self, criteria: ArticleFilter) -> tuple[list[Article], int]:
        stmt = select(ArticleRow)
        if criteria.author_ids is not None:
            if not criteria.author_ids:
                return [], 0
            stmt = stmt.where(ArticleRow.author_id.in_(list(criteria.author_ids)))
        if criteria.author_id is not None:
            stmt = stmt.where(ArticleRow.author_id == criteria.author_id)
        if criteria.tag is not None:
            tagged = (
                select(ArticleTagRow.article_id)
                .join(TagRow, TagRow.id == ArticleTagRow.tag_id)
                .where(TagRow.name == criteria.tag)
            )
            stmt = stmt.where(ArticleRow.id.in_(tagged))
        if criteria.favorited_by is not None:
            favorited = select(FavoriteRow.article_id).where(
                FavoriteRow.user_id == criteria.favorited_by,
            )
            stmt = stmt.where(ArticleRow.id.in_(favorited))

        total = await self._db.scalar(
            select(func.count()).select_from(stmt.subquery()),
        )
        result = await self._db.execute(
            stmt.order_by(ArticleRow.created_at.desc())
            .limit(criteria.limit)
            .offset(criteria.offset),
        )
        rows = list(result.scalars())
        tags = await self._tags_for([r.id for r in rows])
        return [_to_article(r, tags.get(r.id, [])) for r in rows], total or 0

    async def delete_all(self) -> None:
        await self._db.execute(delete(ArticleTagRow))
        await self._db.execute(delete(ArticleRow))

    async def _tags_for(self, article_ids: list[uuid.UUID]) -> dict[uuid.UUID, list[str]]:
        if not article_ids:
            return {}
        result = await self._db.execute(
            select(ArticleTagRow.article_id, TagRow.name)
            .join(TagRow, TagRow.id == ArticleTagRow.tag_id)
            .where(ArticleTagRow.article_id.in_(article_ids))
            .order_by(ArticleTagRow.article_id, ArticleTagRow.position),
        )
        tags: dict[uuid.UUID, list[str]] = {}
        for article_id, name in result.all():
            tags.setdefault(article_id, []).append(name)
        return tags

    async def _link_tags(self, article_id: ArticleId, names: list[str]) -> None:
        """Find-or-create each tag by name, then link in tagList order."""
        if not names:
            return
        result = await self._db.execute(
            select(TagRow).where(TagRow.name.in_(names)),
        )
        by_name = {row.name: row.id for row in result.scalars()}
        for name in names:
            if name not in by_name:
                tag_id = uuid.uuid4()
                self._db.add(TagRow(id=tag_id, name=name))
                by_name[name] = tag_id
        await self._db.flush()
        for position, name in enumerate(names):
            self._db.add(ArticleTagRow(
                article_id=article_id, tag_id=by_name[name], position=position,
            ))
        await self._db.flush()


class SqlTagRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def all(self) -> list[Tag]:
        result = await self._db.execute(
            select(TagRow.name).distinct().order_by(TagRow.name),
        )
        return [Tag(name=name) for name in result.scalars()]

    async def delete_all(self) -> None:
        await self._db.execute(delete(TagRow))


# ─── Comments ───────────────────────────────────────────────────

class SqlCommentRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, comment_id: CommentId) -> Comment | None:
        row = await self._db.get(CommentRow, comment_id)
        return _to_comment(row) if row else None

    async def list_for_article(self, article_id: ArticleId) -> list[Comment]:
        result = await self._db.execute(
            select(CommentRow)
            .where(CommentRow.article_id == article_id)
            .order_by(CommentRow.created_at),
        )
        return [_to_comment(row) for row in result.scalars()]

    async def add(self, comment: Comment) -> None:
        self._db.add(CommentRow(
            id=comment.id,
            body=comment.body,
            author_id=comment.author_id,
            article_id=comment.article_id,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        ))
        await self._db.flush()

    async def delete(self, comment_id: CommentId) -> None:
        await self._db.execute(delete(CommentRow).where(CommentRow.id == comment_id))

    async def delete_all(self) -> None:
        await self._db.execute(delete(CommentRow))


# ─── Edges ──────────────────────────────────────────────────────

class SqlEdgeStore:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def has_follow(self, follower_id: UserId, followed_id: UserId) -> bool:
        row = await self._db.get(FollowRow, (follower_id, followed_id))
        return row is not None

    async def add_follow(self, follower_id: UserId, followed_id: UserId) -> None:
        await self._insert_ignoring_duplicates(
            FollowRow, follower_id=follower_id, followed_id=followed_id,
        )

    async def remove_follow(self, follower_id: UserId, followed_id: UserId) -> bool:
        result = await self._db.execute(
            delete(FollowRow).where(
                FollowRow.follower_id == follower_id,
                FollowRow.followed_id == followed_id,
            ),
        )
        return result.rowcount > 0

    async def followed_among(
        self, follower_id: UserId, candidates: Iterable[UserId],
    ) -> set[UserId]:
        ids = list(set(candidates))
        if not ids:
            return set()
        result = await self._db.execute(
            select(FollowRow.followed_id).where(
                FollowRow.follower_id == follower_id,
                FollowRow.followed_id.in_(ids),
            ),
        )
        return {UserId(i) for i in result.scalars()}

    async def followed_ids(self, follower_id: UserId) -> set[UserId]:
        result = await self._db.execute(
            select(FollowRow.followed_id).where(FollowRow.follower_id == follower_id),
        )
        return {UserId(i) for i in result.scalars()}

    async def has_favorite(self, user_id: UserId, article_id: ArticleId) -> bool:
        row = await self._db.get(FavoriteRow, (user_id, article_id))
        return row is not None

    async def add_favorite(self, user_id: UserId, article_id: ArticleId) -> None:
        await self._insert_ignoring_duplicates(
            FavoriteRow, user_id=user_id, article_id=article_id,
        )

    async def remove_favorite(self, user_id: UserId, article_id: ArticleId) -> bool:
        result = await self._db.execute(
            delete(FavoriteRow).where(
                FavoriteRow.user_id == user_id,
                FavoriteRow.article_id == article_id,
            ),
        )
        return result.rowcount > 0

    async def favorited_among(
        self, user_id: UserId, article_ids: Iterable[ArticleId],
    ) -> set[ArticleId]:
        ids = list(set(article_ids))
        if not ids:
            return set()
        result = await self._db.execute(
            select(FavoriteRow.article_id).where(
                FavoriteRow.user_id == user_id,
                FavoriteRow.article_id.in_(ids),
            ),
        )
        return {ArticleId(i) for i in result.scalars()}

    async def count_favorites(
        self, article_ids: Iterable[ArticleId],
    ) -> dict[ArticleId, int]:
        ids = list(set(article_ids))
        counts: dict[ArticleId, int] = {ArticleId(i): 0 for i in ids}
        if not ids:
            return counts
        result = await self._db.execute(
            select(FavoriteRow.article_id, func.count())
            .where(FavoriteRow.article_id.in_(ids))
            .group_by(FavoriteRow.article_id),
        )
        for article_id, count in result.all():
            counts[ArticleId(article_id)] = count
        return counts

    async def delete_all(self) -> None:
        await self._db.execute(delete(FavoriteRow))
        await self._db.execute(delete(FollowRow))

    async def _insert_ignoring_duplicates(self, model, **values) -> None:
        dialect = self._db.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = pg_insert(model).values(**values).on_conflict_do_nothing()
        elif dialect == "sqlite":
            stmt = sqlite_insert(model).values(**values).on_conflict_do_nothing()
        else:
            stmt = insert(model).values(**values)
        await self._db.execute(stmt)


# ─── Unit of work ───────────────────────────────────────────────

class SqlStore:
    """Store over one AsyncSession; every repository shares its transaction."""

    def __init__(self, db: AsyncSession):
        self._db = db
        self.users = SqlUserRepository(db)
        self.articles = SqlArticleRepository(db)
        self.comments = SqlCommentRepository(db)
        self.tags = SqlTagRepository(db)
        self.edges = SqlEdgeStore(db)

    async def commit(self) -> None:
        await self._db.commit()

    async def rollback(self) -> None:
        await self._db.rollback()
