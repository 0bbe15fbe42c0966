"""Async engine and session plumbing for the token and user stores."""
from typing import Any, AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from token_quota.common.config import settings

Base = declarative_base()


def connect_args_for(database_url: str) -> dict[str, Any]:
    """Driver arguments for a database URL.

    SQLite writers wait up to ``sqlite_busy_timeout`` seconds for the file lock
    instead of failing, so concurrent quota increments queue up.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"timeout": settings.sqlite_busy_timeout}
    return {}


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine configured for ``database_url``."""
    return create_async_engine(
        database_url,
        echo=echo,
        connect_args=connect_args_for(database_url),
    )


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Usecases read attributes after their transaction block commits
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url, echo=settings.debug)
async_session_maker = build_session_maker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session.

    Usecases open and commit their own ``session.begin()`` blocks; anything
    left open by an exception is rolled back here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create the users and tokens tables if they do not exist."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
