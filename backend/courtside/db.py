import logging
import os
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

logger = logging.getLogger(__name__)

engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[sessionmaker] = None
Base = declarative_base()


def database_url() -> str:
    """``DATABASE_URL`` with plain PostgreSQL URLs pointed at asyncpg."""

    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL environment variable is required")
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite+aiosqlite://"):
        return {"pool_pre_ping": True}
    # One shared connection holds an in-memory database; files need no pool.
    return {"poolclass": StaticPool if ":memory:" in url else NullPool}


def get_engine() -> AsyncEngine:
    """Engine and session factory, built on first call."""

    global engine, AsyncSessionLocal

    if engine is None:
        url = database_url()
        engine = create_async_engine(url, echo=False, **_engine_options(url))
        AsyncSessionLocal = sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
        logger.info("Database engine ready for %s", engine.url.render_as_string())

    return engine


async def create_schema() -> None:
    """Create the game and point tables if missing (local runs; use Alembic otherwise)."""

    from . import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncIterator[AsyncSession]:
    if AsyncSessionLocal is None:
        get_engine()

    async with AsyncSessionLocal() as session:
        yield session
