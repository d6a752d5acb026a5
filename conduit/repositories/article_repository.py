"""
Article persistence.

Rows are mapped to ``Article`` entities by hand. Saving an article is a
multi-statement operation (article row, tag rows, tag links); it runs
inside the caller's unit of work (``session_scope``) and only flushes, so
a failure part-way leaves nothing behind once the scope rolls back.
"""
from typing import Awaitable, Callable

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.database import on_commit
from conduit.domain import Article
from conduit.models import ArticleRow, CommentRow, TagRow, article_favorites, article_tags
from conduit.repositories._mapping import as_utc


def _to_entity(row: ArticleRow, tags: set[str]) -> Article:
    return Article(
        id=row.id,
        author_id=row.user_id,
        title=row.title,
        slug=row.slug,
        description=row.description,
        body=row.body,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        tags=tags,
    )


def _apply(row: ArticleRow, article: Article) -> None:
    row.user_id = article.author_id
    row.title = article.title
    row.slug = article.slug
    row.description = article.description
    row.body = article.body
    row.created_at = as_utc(article.created_at)
    row.updated_at = as_utc(article.updated_at)


class ArticleRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    def after_commit(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Defer *callback* until the unit of work holding these writes commits."""
        on_commit(self._session, callback)

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    async def _resolve_tag_ids(self, names: set[str]) -> list[int]:
        """Return ids for *names*, inserting any tag that does not exist yet."""
        if not names:
            return []
        result = await self._session.execute(select(TagRow).where(TagRow.name.in_(names)))
        existing = {tag.name: tag for tag in result.scalars().all()}
        for name in sorted(names - existing.keys()):
            tag = TagRow(name=name)
            self._session.add(tag)
            existing[name] = tag
        await self._session.flush()
        return [existing[name].id for name in sorted(names)]

    async def _tags_of(self, article_id: str) -> set[str]:
        result = await self._session.execute(
            select(TagRow.name)
            .join(article_tags, article_tags.c.tag_id == TagRow.id)
            .where(article_tags.c.article_id == article_id)
        )
        return set(result.scalars().all())

    # ------------------------------------------------------------------
    # Aggregate
    # ------------------------------------------------------------------

    async def save(self, article: Article) -> None:
        row = await self._session.get(ArticleRow, article.id)
        if row is None:
            row = ArticleRow(id=article.id)
            self._session.add(row)
        _apply(row, article)
        await self._session.flush()

        tag_ids = await self._resolve_tag_ids(article.tags)
        await self._session.execute(
            delete(article_tags).where(article_tags.c.article_id == article.id)
        )
        if tag_ids:
            await self._session.execute(
                insert(article_tags),
                [{"article_id": article.id, "tag_id": tag_id} for tag_id in tag_ids],
            )

    async def find_by_id(self, article_id: str) -> Article | None:
        row = await self._session.get(ArticleRow, article_id)
        if row is None:
            return None
        return _to_entity(row, await self._tags_of(row.id))

    async def find_by_slug(self, slug: str) -> Article | None:
        result = await self._session.execute(select(ArticleRow).where(ArticleRow.slug == slug))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return _to_entity(row, await self._tags_of(row.id))

    async def remove(self, article: Article) -> None:
        """Delete the article with its tag links, favorites and comments."""
        for stmt in (
            delete(article_tags).where(article_tags.c.article_id == article.id),
            delete(article_favorites).where(article_favorites.c.article_id == article.id),
            delete(CommentRow).where(CommentRow.article_id == article.id),
        ):
            await self._session.execute(stmt)
        row = await self._session.get(ArticleRow, article.id)
        if row is not None:
            await self._session.delete(row)
        await self._session.flush()

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    async def is_favorited(self, article_id: str, user_id: str) -> bool:
        result = await self._session.execute(
            select(article_favorites.c.user_id).where(
                article_favorites.c.article_id == article_id,
                article_favorites.c.user_id == user_id,
            )
        )
        return result.first() is not None

    async def favorite(self, article_id: str, user_id: str) -> None:
        if await self.is_favorited(article_id, user_id):
            return
        await self._session.execute(
            insert(article_favorites).values(article_id=article_id, user_id=user_id)
        )

    async def unfavorite(self, article_id: str, user_id: str) -> None:
        await self._session.execute(
            delete(article_favorites).where(
                article_favorites.c.article_id == article_id,
                article_favorites.c.user_id == user_id,
            )
        )

    async def count(self) -> int:
        return (await self._session.execute(select(func.count()).select_from(ArticleRow))).scalar_one()
