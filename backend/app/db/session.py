"""
Database engine and sessions for the Aiser backend.
- DATABASE_URL comes from settings; plain postgresql:// URLs are switched to the asyncpg driver
- SQLite (the development default) gets a connection setup usable from the event loop
- `get_session()` is the per-request FastAPI dependency; `close_db()` runs on shutdown
"""

from __future__ import annotations

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from backend.app.core.config import settings
from backend.app.core.logger import logger


def normalize_database_url(url: str) -> str:
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


def engine_options(url: str, debug: bool = False) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": debug}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_pre_ping"] = True
    return options


DATABASE_URL: str = normalize_database_url(settings.DATABASE_URL)

engine: AsyncEngine = create_async_engine(DATABASE_URL, **engine_options(DATABASE_URL, settings.DEBUG))

async_session: sessionmaker[AsyncSession] = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Create the users and holdings tables if they do not exist yet."""
    from backend.app.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info(f"Database ready ({engine.url.get_backend_name()})")


async def close_db() -> None:
    await engine.dispose()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        yield session
