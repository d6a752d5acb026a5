"""
Article read side.

Listing issues a fixed number of statements however many articles are on
the page: COUNT, the page itself, then one batched query each for tags,
favorite counts, the viewer's favorites, authors and the viewer's follows.
"""
from collections import defaultdict
from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from conduit.cache import cache
from conduit.config import settings
from conduit.models import ArticleRow, TagRow, UserRow, article_favorites, article_tags, follows
from conduit.queries.profile_queries import ProfileQueryService
from conduit.queries.views import iso


class ArticleQueryService:
    def __init__(self, session: AsyncSession):
        self._session = session
        self._profiles = ProfileQueryService(session)

    # ------------------------------------------------------------------
    # Batched decoration
    # ------------------------------------------------------------------

    async def _tags_by_article(self, ids: list[str]) -> dict[str, list[str]]:
        result = await self._session.execute(
            select(article_tags.c.article_id, TagRow.name)
            .join(TagRow, TagRow.id == article_tags.c.tag_id)
            .where(article_tags.c.article_id.in_(ids))
        )
        tags: dict[str, list[str]] = defaultdict(list)
        for article_id, name in result.all():
            tags[article_id].append(name)
        return tags

    async def _favorite_counts(self, ids: list[str]) -> dict[str, int]:
        result = await self._session.execute(
            select(article_favorites.c.article_id, func.count())
            .where(article_favorites.c.article_id.in_(ids))
            .group_by(article_favorites.c.article_id)
        )
        return {article_id: count for article_id, count in result.all()}

    async def _favorited_by(self, viewer_id: str | None, ids: list[str]) -> set[str]:
        if viewer_id is None:
            return set()
        result = await self._session.execute(
            select(article_favorites.c.article_id).where(
                article_favorites.c.user_id == viewer_id,
                article_favorites.c.article_id.in_(ids),
            )
        )
        return set(result.scalars().all())

    async def _render(self, rows: Sequence[ArticleRow], viewer_id: str | None) -> list[dict]:
        if not rows:
            return []
        ids = [row.id for row in rows]
        tags = await self._tags_by_article(ids)
        counts = await self._favorite_counts(ids)
        favorited = await self._favorited_by(viewer_id, ids)
        authors = await self._profiles.profiles_for({row.user_id for row in rows}, viewer_id)
        return [
            {
                "slug": row.slug,
                "title": row.title,
                "description": row.description,
                "body": row.body,
                "tagList": sorted(tags.get(row.id, [])),
                "createdAt": iso(row.created_at),
                "updatedAt": iso(row.updated_at),
                "favorited": row.id in favorited,
                "favoritesCount": counts.get(row.id, 0),
                "author": authors.get(row.user_id),
            }
            for row in rows
        ]

    async def _page(self, stmt: Select, limit: int, offset: int, viewer_id: str | None) -> dict:
        total: int = (
            await self._session.execute(select(func.count()).select_from(stmt.subquery()))
        ).scalar_one()
        result = await self._session.execute(
            stmt.order_by(ArticleRow.created_at.desc()).limit(limit).offset(offset)
        )
        articles = await self._render(result.scalars().all(), viewer_id)
        return {"articles": articles, "articlesCount": total}

    # ------------------------------------------------------------------
    # Public queries
    # ------------------------------------------------------------------

    async def find_by_slug(self, slug: str, viewer_id: str | None = None) -> dict | None:
        """Article view for *slug*; anonymous views go through the cache."""
        cache_key = cache.article_detail_key(slug)
        if viewer_id is None:
            cached = await cache.get(cache_key)
            if cached:
                return cached

        result = await self._session.execute(select(ArticleRow).where(ArticleRow.slug == slug))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        view = (await self._render([row], viewer_id))[0]
        if viewer_id is None:
            await cache.set(cache_key, view, ttl=settings.CACHE_TTL_DETAIL)
        return view

    async def find_by_id(self, article_id: str, viewer_id: str | None = None) -> dict | None:
        row = await self._session.get(ArticleRow, article_id)
        if row is None:
            return None
        return (await self._render([row], viewer_id))[0]

    async def find_recent(
        self,
        tag: str | None = None,
        author: str | None = None,
        favorited_by: str | None = None,
        limit: int = 20,
        offset: int = 0,
        viewer_id: str | None = None,
    ) -> dict:
        """Newest-first page of articles, optionally filtered by tag, author or favoriter."""
        cache_key = cache.article_list_key(tag, author, favorited_by, limit, offset)
        if viewer_id is None:
            cached = await cache.get(cache_key)
            if cached:
                return cached

        stmt = select(ArticleRow)
        if tag:
            stmt = (
                stmt.join(article_tags, article_tags.c.article_id == ArticleRow.id)
                .join(TagRow, TagRow.id == article_tags.c.tag_id)
                .where(TagRow.name == tag)
            )
        if author:
            stmt = stmt.join(UserRow, UserRow.id == ArticleRow.user_id).where(
                UserRow.username == author
            )
        if favorited_by:
            fan = aliased(UserRow)
            stmt = (
                stmt.join(article_favorites, article_favorites.c.article_id == ArticleRow.id)
                .join(fan, fan.id == article_favorites.c.user_id)
                .where(fan.username == favorited_by)
            )
        page = await self._page(stmt, limit, offset, viewer_id)
        if viewer_id is None:
            await cache.set(cache_key, page, ttl=settings.CACHE_TTL_LIST)
        return page

    async def find_feed(self, viewer_id: str, limit: int = 20, offset: int = 0) -> dict:
        """Articles by authors *viewer_id* follows, newest first."""
        followed = select(follows.c.follow_id).where(follows.c.user_id == viewer_id)
        stmt = select(ArticleRow).where(ArticleRow.user_id.in_(followed))
        return await self._page(stmt, limit, offset, viewer_id)
