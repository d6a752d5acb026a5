from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import UserRow, follows
from conduit.queries.views import profile_view


class ProfileQueryService:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _followed_among(self, viewer_id: str | None, user_ids: Iterable[str]) -> set[str]:
        ids = list(user_ids)
        if viewer_id is None or not ids:
            return set()
        result = await self._session.execute(
            select(follows.c.follow_id).where(
                follows.c.user_id == viewer_id, follows.c.follow_id.in_(ids)
            )
        )
        return set(result.scalars().all())

    async def profiles_for(self, user_ids: Iterable[str], viewer_id: str | None = None) -> dict[str, dict]:
        """Profile views keyed by user id, in two queries regardless of count."""
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self._session.execute(select(UserRow).where(UserRow.id.in_(ids)))
        rows = result.scalars().all()
        followed = await self._followed_among(viewer_id, ids)
        return {
            row.id: profile_view(row.username, row.bio, row.image, row.id in followed)
            for row in rows
        }

    async def find_by_username(self, username: str, viewer_id: str | None = None) -> dict | None:
        result = await self._session.execute(select(UserRow).where(UserRow.username == username))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        followed = await self._followed_among(viewer_id, [row.id])
        return profile_view(row.username, row.bio, row.image, row.id in followed)
