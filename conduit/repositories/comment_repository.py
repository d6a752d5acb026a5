from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.domain import Comment
from conduit.models import CommentRow
from conduit.repositories._mapping import as_utc


def _to_entity(row: CommentRow) -> Comment:
    return Comment(
        id=row.id,
        body=row.body,
        author_id=row.user_id,
        article_id=row.article_id,
        created_at=as_utc(row.created_at),
    )


class CommentRepository:
    """Comments are append-only: ``save`` inserts, there is no update."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, comment: Comment) -> None:
        self._session.add(
            CommentRow(
                id=comment.id,
                body=comment.body,
                user_id=comment.author_id,
                article_id=comment.article_id,
                created_at=as_utc(comment.created_at),
            )
        )
        await self._session.flush()

    async def find_by_id(self, article_id: str, comment_id: str) -> Comment | None:
        """Look a comment up within its article; a comment on another article is absent."""
        result = await self._session.execute(
            select(CommentRow).where(
                CommentRow.id == comment_id, CommentRow.article_id == article_id
            )
        )
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def remove(self, comment: Comment) -> None:
        row = await self._session.get(CommentRow, comment.id)
        if row is not None:
            await self._session.delete(row)
            await self._session.flush()
