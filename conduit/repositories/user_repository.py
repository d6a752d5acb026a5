from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.domain import User
from conduit.models import UserRow, follows


def _to_entity(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        username=row.username,
        password=row.password,
        bio=row.bio or "",
        image=row.image or "",
    )


def _apply(row: UserRow, user: User) -> None:
    row.email = user.email
    row.username = user.username
    row.password = user.password
    row.bio = user.bio
    row.image = user.image


class UserRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, user: User) -> None:
        row = await self._session.get(UserRow, user.id)
        if row is None:
            row = UserRow(id=user.id)
            self._session.add(row)
        _apply(row, user)
        await self._session.flush()

    async def find_by_id(self, user_id: str) -> User | None:
        row = await self._session.get(UserRow, user_id)
        return _to_entity(row) if row else None

    async def find_by_username(self, username: str) -> User | None:
        result = await self._session.execute(select(UserRow).where(UserRow.username == username))
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def find_by_email(self, email: str) -> User | None:
        result = await self._session.execute(select(UserRow).where(UserRow.email == email))
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    # ------------------------------------------------------------------
    # Follow relation
    # ------------------------------------------------------------------

    async def is_following(self, user_id: str, target_id: str) -> bool:
        result = await self._session.execute(
            select(follows.c.user_id).where(
                follows.c.user_id == user_id, follows.c.follow_id == target_id
            )
        )
        return result.first() is not None

    async def follow(self, user_id: str, target_id: str) -> None:
        if await self.is_following(user_id, target_id):
            return
        await self._session.execute(insert(follows).values(user_id=user_id, follow_id=target_id))

    async def unfollow(self, user_id: str, target_id: str) -> None:
        await self._session.execute(
            delete(follows).where(follows.c.user_id == user_id, follows.c.follow_id == target_id)
        )
