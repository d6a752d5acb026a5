from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError

from conduit.dependencies import (
    PaginationParams,
    get_article_queries,
    get_article_service,
    get_comment_service,
    get_current_user_id,
    require_user_id,
)
from conduit.queries import ArticleQueryService
from conduit.schemas import NewArticleRequest, NewCommentRequest, UpdateArticleRequest
from conduit.services import ArticleService, CommentService

router = APIRouter(prefix="/api/articles", tags=["articles"])


@router.get("")
async def list_articles(
    tag: str | None = Query(None),
    author: str | None = Query(None),
    favorited: str | None = Query(None),
    pagination: PaginationParams = Depends(),
    viewer_id: str | None = Depends(get_current_user_id),
    queries: ArticleQueryService = Depends(get_article_queries),
):
    return await queries.find_recent(
        tag=tag,
        author=author,
        favorited_by=favorited,
        limit=pagination.limit,
        offset=pagination.offset,
        viewer_id=viewer_id,
    )


# Declared before "/{slug}" so "feed" is never taken for a slug
@router.get("/feed")
async def feed(
    pagination: PaginationParams = Depends(),
    user_id: str = Depends(require_user_id),
    queries: ArticleQueryService = Depends(get_article_queries),
):
    return await queries.find_feed(user_id, pagination.limit, pagination.offset)


@router.post("", status_code=201)
async def create_article(
    data: NewArticleRequest,
    user_id: str = Depends(require_user_id),
    articles: ArticleService = Depends(get_article_service),
):
    try:
        return {"article": await articles.create_article(user_id, data.article)}
    except IntegrityError:
        raise HTTPException(status_code=409, detail="An article with this slug already exists")


@router.get("/{slug}")
async def get_article(
    slug: str,
    viewer_id: str | None = Depends(get_current_user_id),
    queries: ArticleQueryService = Depends(get_article_queries),
):
    article = await queries.find_by_slug(slug, viewer_id)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return {"article": article}


@router.put("/{slug}")
async def update_article(
    slug: str,
    data: UpdateArticleRequest,
    user_id: str = Depends(require_user_id),
    articles: ArticleService = Depends(get_article_service),
):
    try:
        return {"article": await articles.update_article(slug, user_id, data.article)}
    except IntegrityError:
        raise HTTPException(status_code=409, detail="An article with this slug already exists")


@router.delete("/{slug}")
async def delete_article(
    slug: str,
    user_id: str = Depends(require_user_id),
    articles: ArticleService = Depends(get_article_service),
):
    await articles.delete_article(slug, user_id)
    return {}


@router.post("/{slug}/favorite")
async def favorite_article(
    slug: str,
    user_id: str = Depends(require_user_id),
    articles: ArticleService = Depends(get_article_service),
):
    return {"article": await articles.favorite(slug, user_id)}


@router.delete("/{slug}/favorite")
async def unfavorite_article(
    slug: str,
    user_id: str = Depends(require_user_id),
    articles: ArticleService = Depends(get_article_service),
):
    return {"article": await articles.unfavorite(slug, user_id)}


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@router.get("/{slug}/comments")
async def list_comments(
    slug: str,
    viewer_id: str | None = Depends(get_current_user_id),
    comments: CommentService = Depends(get_comment_service),
):
    return {"comments": await comments.list_comments(slug, viewer_id)}


@router.post("/{slug}/comments", status_code=201)
async def add_comment(
    slug: str,
    data: NewCommentRequest,
    user_id: str = Depends(require_user_id),
    comments: CommentService = Depends(get_comment_service),
):
    return {"comment": await comments.add_comment(slug, user_id, data.comment.body)}


@router.delete("/{slug}/comments/{comment_id}")
async def delete_comment(
    slug: str,
    comment_id: str,
    user_id: str = Depends(require_user_id),
    comments: CommentService = Depends(get_comment_service),
):
    await comments.delete_comment(slug, comment_id, user_id)
    return {}
