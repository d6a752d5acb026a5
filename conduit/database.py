from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from conduit.config import settings
from conduit.middleware import install_query_counter

# Module-level engine; tests swap the session factory through dependency overrides.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


_ON_COMMIT = "on_commit"


def on_commit(session: AsyncSession, callback: Callable[[], Awaitable[None]]) -> None:
    """Run *callback* once the enclosing ``session_scope`` has committed."""
    session.info.setdefault(_ON_COMMIT, []).append(callback)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession] = async_session,
) -> AsyncIterator[AsyncSession]:
    """
    One unit of work: commit when the block exits cleanly, roll back on
    any exception, and always close the session.

    Callbacks registered with ``on_commit`` run after a successful commit
    and are dropped on rollback.
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            session.info.pop(_ON_COMMIT, None)
            await session.rollback()
            raise
        for callback in session.info.pop(_ON_COMMIT, []):
            await callback()


async def get_db() -> AsyncIterator[AsyncSession]:
    async with session_scope() as session:
        yield session

