"""
Article service: the write side of the Article aggregate.

Each use case loads the entity through the repository, applies the domain
operation, saves it and answers with the read view built by
``ArticleQueryService``. Only the author may change or delete an article;
that rule lives here rather than in the entity. Every write drops the
anonymous cache entries it could have made stale, once its unit of work
has committed.
"""
import logging
from functools import partial

from conduit.cache import cache
from conduit.domain import Article, AuthorizationError, EntityNotFoundError
from conduit.queries import ArticleQueryService
from conduit.repositories import ArticleRepository
from conduit.schemas import NewArticle, UpdateArticle

logger = logging.getLogger(__name__)


class ArticleService:
    def __init__(self, articles: ArticleRepository, queries: ArticleQueryService):
        self._articles = articles
        self._queries = queries

    def _invalidate(self, *slugs: str) -> None:
        self._articles.after_commit(partial(cache.invalidate_article, *slugs))

    async def _load(self, slug: str) -> Article:
        article = await self._articles.find_by_slug(slug)
        if article is None:
            raise EntityNotFoundError("Article", slug)
        return article

    async def _load_owned(self, slug: str, user_id: str) -> Article:
        article = await self._load(slug)
        if not article.is_written_by(user_id):
            raise AuthorizationError(f"user {user_id} is not the author of {slug}")
        return article

    async def create_article(self, author_id: str, data: NewArticle) -> dict:
        article = Article.create(
            title=data.title,
            description=data.description,
            body=data.body,
            tags=data.tag_list,
            author_id=author_id,
        )
        await self._articles.save(article)
        self._invalidate()
        logger.info("Article %s created by %s", article.slug, author_id)
        return await self._queries.find_by_id(article.id, author_id)

    async def update_article(self, slug: str, user_id: str, data: UpdateArticle) -> dict:
        article = await self._load_owned(slug, user_id)
        article.update(title=data.title, description=data.description, body=data.body)
        if data.tag_list is not None:
            article.update_tags(data.tag_list)
        await self._articles.save(article)
        self._invalidate(slug, article.slug)
        return await self._queries.find_by_id(article.id, user_id)

    async def delete_article(self, slug: str, user_id: str) -> None:
        article = await self._load_owned(slug, user_id)
        await self._articles.remove(article)
        self._invalidate(slug)
        logger.info("Article %s deleted by %s", slug, user_id)

    async def favorite(self, slug: str, user_id: str) -> dict:
        article = await self._load(slug)
        await self._articles.favorite(article.id, user_id)
        self._invalidate(slug)
        return await self._queries.find_by_id(article.id, user_id)

    async def unfavorite(self, slug: str, user_id: str) -> dict:
        article = await self._load(slug)
        await self._articles.unfavorite(article.id, user_id)
        self._invalidate(slug)
        return await self._queries.find_by_id(article.id, user_id)
