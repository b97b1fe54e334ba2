"""Article Routes - listing, feed, CRUD and favorites.

Invariants:
    - /api/articles/feed is declared before /api/articles/{slug}
    - limit/offset are validated here (limit >= 1, offset >= 0); the page cap is
      applied by the handler
"""

from fastapi import APIRouter, Depends, Query, Response, status

from conduit.api.dependencies import (
    get_current_user_id, get_dispatcher, get_optional_user_id,
)
from conduit.core.commands import (
    CreateArticle, GetArticle, UpdateArticle, DeleteArticle,
    ListArticles, GetFeed, FavoriteArticle, UnfavoriteArticle,
)
from conduit.core.domain_types import UserId, DEFAULT_PAGE_SIZE
from conduit.core.errors import unwrap
from conduit.schemas.requests import CreateArticleRequest, UpdateArticleRequest
from conduit.schemas.views import ArticleEnvelope, ArticleListEnvelope
from conduit.services.dispatch import Dispatcher

router = APIRouter(prefix="/api/articles", tags=["articles"])


@router.get("", response_model=ArticleListEnvelope)
async def list_articles(
    tag: str | None = None,
    author: str | None = None,
    favorited: str | None = None,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1),
    offset: int = Query(default=0, ge=0),
    viewer_id: UserId | None = Depends(get_optional_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(ListArticles(
        tag=tag, author=author, favorited=favorited,
        limit=limit, offset=offset, viewer_id=viewer_id,
    ))
    return unwrap(result)


@router.get("/feed", response_model=ArticleListEnvelope)
async def feed(
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1),
    offset: int = Query(default=0, ge=0),
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(GetFeed(user_id=user_id, limit=limit, offset=offset))
    return unwrap(result)


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=ArticleEnvelope,
)
async def create_article(
    body: CreateArticleRequest,
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    data = body.article
    result = await dispatcher.send(CreateArticle(
        title=data.title,
        description=data.description,
        body=data.body,
        author_id=user_id,
        tag_list=tuple(data.tag_list),
    ))
    return ArticleEnvelope(article=unwrap(result))


@router.get("/{slug}", response_model=ArticleEnvelope)
async def get_article(
    slug: str,
    viewer_id: UserId | None = Depends(get_optional_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(GetArticle(slug=slug, viewer_id=viewer_id))
    return ArticleEnvelope(article=unwrap(result))


@router.put("/{slug}", response_model=ArticleEnvelope)
async def update_article(
    slug: str,
    body: UpdateArticleRequest,
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    data = body.article
    result = await dispatcher.send(UpdateArticle(
        slug=slug,
        user_id=user_id,
        title=data.title,
        description=data.description,
        body=data.body,
    ))
    return ArticleEnvelope(article=unwrap(result))


@router.delete(
    "/{slug}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
)
async def delete_article(
    slug: str,
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    unwrap(await dispatcher.send(DeleteArticle(slug=slug, user_id=user_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Favorites ──────────────────────────────────────────────────

@router.post("/{slug}/favorite", response_model=ArticleEnvelope)
async def favorite_article(
    slug: str,
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(FavoriteArticle(slug=slug, user_id=user_id))
    return ArticleEnvelope(article=unwrap(result))


@router.delete("/{slug}/favorite", response_model=ArticleEnvelope)
async def unfavorite_article(
    slug: str,
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(UnfavoriteArticle(slug=slug, user_id=user_id))
    return ArticleEnvelope(article=unwrap(result))
