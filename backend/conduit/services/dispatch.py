"""Dispatcher - explicit routing from command/query type to handler.

Invariants:
    - Every type->handler mapping is visible - no getattr magic, no auto-discovery
    - Unknown request types return an UNEXPECTED failure (never raises)
    - Commands are committed when the handler succeeds and rolled back when it fails;
      queries are never committed
    - SQLAlchemyError from a handler or commit becomes an UNEXPECTED
      failure after rollback; the raw error is logged, never returned
    - Every request is logged with its name, actor, outcome and duration

Design Decisions:
    - Explicit dict over getattr: every mapping visible in one place
    - Handlers split by resource: a handful of methods per class
    - Handlers instantiated per-dispatcher with a shared Store, so one request is
      one unit of work
"""

import logging
import time

from sqlalchemy.exc import SQLAlchemyError

from conduit.core.commands import (
    Command,
    RegisterUser, LoginUser, GetCurrentUser, UpdateUser, InviteUser,
    GetProfile, FollowUser, UnfollowUser,
    CreateArticle, GetArticle, UpdateArticle, DeleteArticle,
    ListArticles, GetFeed, FavoriteArticle, UnfavoriteArticle,
    AddComment, GetComments, DeleteComment,
    ListTags, WipeAllData,
)
from conduit.core.domain_types import ErrorKind, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from conduit.core.repository_protocols import Credentials, Store
from conduit.core.result import Result
from conduit.services.relationship_registry import RelationshipRegistry
from conduit.services.handle_profiles import ProfileHandlers
from conduit.services.handle_articles import ArticleHandlers
from conduit.services.handle_comments import CommentHandlers
from conduit.services.handle_users import UserHandlers
from conduit.services.handle_tags import TagHandlers
from conduit.services.handle_maintenance import MaintenanceHandlers

logger = logging.getLogger(__name__)

UNEXPECTED_MESSAGE = "An unexpected error occurred"


def _actor(request: object):
    for attr in ("user_id", "viewer_id", "author_id", "inviter_id"):
        value = getattr(request, attr, None)
        if value is not None:
            return value
    return None


class Dispatcher:
    """Routes request type -> handler. Explicit registration, no auto-discovery."""

    def __init__(
        self,
        store: Store,
        credentials: Credentials,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self._store = store
        registry = RelationshipRegistry(store)
        profiles = ProfileHandlers(store, registry)
        articles = ArticleHandlers(
            store, registry, default_page_size, max_page_size,
        )
        comments = CommentHandlers(store, registry)
        users = UserHandlers(store, credentials)
        tags = TagHandlers(store)
        maintenance = MaintenanceHandlers(store)

        self.registry = registry

        # Every mapping explicit - adding a request type requires editing this dict
        self._handlers = {
            # Identity (5)
            RegisterUser: users.register_user,
            LoginUser: users.login_user,
            GetCurrentUser: users.get_current_user,
            UpdateUser: users.update_user,
            InviteUser: users.invite_user,

            # Profiles (3)
            GetProfile: profiles.get_profile,
            FollowUser: profiles.follow_user,
            UnfollowUser: profiles.unfollow_user,

            # Articles (8)
            CreateArticle: articles.create_article,
            GetArticle: articles.get_article,
            UpdateArticle: articles.update_article,
            DeleteArticle: articles.delete_article,
            ListArticles: articles.list_articles,
            GetFeed: articles.get_feed,
            FavoriteArticle: articles.favorite_article,
            UnfavoriteArticle: articles.unfavorite_article,

            # Comments (3)
            AddComment: comments.add_comment,
            GetComments: comments.get_comments,
            DeleteComment: comments.delete_comment,

            # Tags & maintenance (2)
            ListTags: tags.list_tags,
            WipeAllData: maintenance.wipe_all_data,
        }

    async def send(self, request: object) -> Result:
        """Route request to its handler, then commit or roll back. Logs every call."""
        name = type(request).__name__
        handler = self._handlers.get(type(request))
        if handler is None:
            logger.error(f"No handler registered for {name}", extra={"command": name})
            return Result.fail(ErrorKind.UNEXPECTED, f"Unknown request '{name}'")

        started = time.perf_counter()
        try:
            result = await handler(request)
            if isinstance(request, Command):
                if result.is_ok:
                    await self._store.commit()
                else:
                    await self._store.rollback()
        except SQLAlchemyError as e:
            logger.error(
                f"{name} failed with a data-access error: {e}",
                extra={
                    "command": name,
                    "user_id": _actor(request),
                    "error_code": "DATABASE_ERROR",
                },
                exc_info=True,
            )
            await self._store.rollback()
            return Result.fail(ErrorKind.UNEXPECTED, UNEXPECTED_MESSAGE)

        self._log_outcome(name, request, result, started)
        return result

    def _log_outcome(
        self, name: str, request: object, result: Result, started: float,
    ) -> None:
        extra = {
            "command": name,
            "user_id": _actor(request),
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        }
        if result.is_ok:
            logger.info(f"{name} succeeded", extra=extra)
        else:
            extra["error_code"] = result.error.kind.value
            logger.info(f"{name} failed: {result.error.message}", extra=extra)
