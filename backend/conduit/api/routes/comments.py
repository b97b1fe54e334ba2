"""Comment Routes - add, list and delete comments under an article slug."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from conduit.api.dependencies import (
    get_current_user_id, get_dispatcher, get_optional_user_id,
)
from conduit.core.commands import AddComment, GetComments, DeleteComment
from conduit.core.domain_types import UserId, CommentId
from conduit.core.errors import unwrap
from conduit.schemas.requests import CreateCommentRequest
from conduit.schemas.views import CommentEnvelope, CommentListEnvelope
from conduit.services.dispatch import Dispatcher

router = APIRouter(prefix="/api/articles/{slug}/comments", tags=["comments"])


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=CommentEnvelope,
)
async def add_comment(
    slug: str,
    body: CreateCommentRequest,
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(
        AddComment(slug=slug, body=body.comment.body, author_id=user_id),
    )
    return CommentEnvelope(comment=unwrap(result))


@router.get("", response_model=CommentListEnvelope)
async def get_comments(
    slug: str,
    viewer_id: UserId | None = Depends(get_optional_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(GetComments(slug=slug, viewer_id=viewer_id))
    return CommentListEnvelope(comments=unwrap(result))


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_comment(
    slug: str,
    comment_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    unwrap(await dispatcher.send(DeleteComment(
        slug=slug, comment_id=CommentId(comment_id), user_id=user_id,
    )))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
