"""Comment Handlers - add, list and delete comments on an article (3 methods).

Invariants:
    - A comment always belongs to an existing article
    - Only the comment's author may delete it (FORBIDDEN otherwise)
    - Listing a missing article's comments is MISSING_ENTITY; comments are oldest first
"""

from conduit.core.commands import AddComment, GetComments, DeleteComment
from conduit.core.entities import Comment, EntityInvariantError
from conduit.core.repository_protocols import Store
from conduit.core.result import Result, not_found, missing_entity, forbidden, invalid
from conduit.core.view_assembly import map_comment
from conduit.schemas.views import CommentView
from conduit.services.relationship_registry import RelationshipRegistry


class CommentHandlers:
    """Comments scoped to an article slug."""

    def __init__(self, store: Store, registry: RelationshipRegistry):
        self.store = store
        self.registry = registry

    async def add_comment(self, command: AddComment) -> Result[CommentView]:
        article = await self.store.articles.get_by_slug(command.slug)
        if article is None:
            return not_found(f"Article '{command.slug}' not found")
        author = await self.store.users.get(command.author_id)
        if author is None:
            return not_found("Author not found")
        try:
            comment = Comment(
                body=command.body, author_id=author.id, article_id=article.id,
            )
        except EntityInvariantError as e:
            return invalid(e.field, e.message)

        await self.store.comments.add(comment)
        ctx = await self.registry.view_context(author.id, [author.id])
        return Result.ok(map_comment(comment, author, ctx))

    async def get_comments(self, query: GetComments) -> Result[list[CommentView]]:
        article = await self.store.articles.get_by_slug(query.slug)
        if article is None:
            return missing_entity("Article", query.slug)
        comments = await self.store.comments.list_for_article(article.id)
        authors = await self.store.users.get_many(c.author_id for c in comments)
        ctx = await self.registry.view_context(query.viewer_id, authors.keys())
        return Result.ok([
            map_comment(c, authors[c.author_id], ctx) for c in comments
        ])

    async def delete_comment(self, command: DeleteComment) -> Result[None]:
        article = await self.store.articles.get_by_slug(command.slug)
        if article is None:
            return not_found(f"Article '{command.slug}' not found")
        comment = await self.store.comments.get(command.comment_id)
        if comment is None or comment.article_id != article.id:
            return not_found(f"Comment '{command.comment_id}' not found")
        if not comment.is_written_by(command.user_id):
            return forbidden("You are not the author of this comment")
        await self.store.comments.delete(comment.id)
        return Result.ok()
