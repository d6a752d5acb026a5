from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import TagRow, article_tags


class TagQueryService:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def all(self) -> list[str]:
        """Names of tags attached to at least one article, sorted."""
        result = await self._session.execute(
            select(TagRow.name)
            .join(article_tags, article_tags.c.tag_id == TagRow.id)
            .distinct()
            .order_by(TagRow.name)
        )
        return list(result.scalars().all())
