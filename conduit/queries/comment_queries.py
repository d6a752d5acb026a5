from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import CommentRow
from conduit.queries.profile_queries import ProfileQueryService
from conduit.queries.views import iso


class CommentQueryService:
    def __init__(self, session: AsyncSession):
        self._session = session
        self._profiles = ProfileQueryService(session)

    async def _render(self, rows: Sequence[CommentRow], viewer_id: str | None) -> list[dict]:
        if not rows:
            return []
        authors = await self._profiles.profiles_for({row.user_id for row in rows}, viewer_id)
        return [
            {
                "id": row.id,
                "body": row.body,
                # Comments are never edited, so both stamps are the posting time.
                "createdAt": iso(row.created_at),
                "updatedAt": iso(row.created_at),
                "author": authors.get(row.user_id),
            }
            for row in rows
        ]

    async def find_by_id(self, comment_id: str, viewer_id: str | None = None) -> dict | None:
        row = await self._session.get(CommentRow, comment_id)
        if row is None:
            return None
        return (await self._render([row], viewer_id))[0]

    async def find_by_article(self, article_id: str, viewer_id: str | None = None) -> list[dict]:
        """All comments on an article, oldest first."""
        result = await self._session.execute(
            select(CommentRow)
            .where(CommentRow.article_id == article_id)
            .order_by(CommentRow.created_at.asc())
        )
        return await self._render(result.scalars().all(), viewer_id)
