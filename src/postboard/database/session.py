"""
Process-wide database handle.

`Database` owns the AsyncEngine (and with it the connection pool) plus the session
factory. It is created once at startup (see `postboard.main.lifespan`), stored on
`app.state.database`, handed to repositories through FastAPI dependencies, and
disposed on shutdown.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from postboard.config.settings import Settings
from postboard.database.base import Base

logger = logging.getLogger(__name__)


def safe_db_url(db_url: str) -> str:
    """
    Return the URL without credentials, for logging.
    """
    parsed = urlparse(db_url)
    if parsed.scheme.startswith("sqlite"):
        return db_url
    return f"{parsed.scheme}://{parsed.hostname}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


class Database:
    """
    Explicitly constructed, explicitly closed store handle.

    Args:
        url: async SQLAlchemy URL (e.g. postgresql+psycopg://..., sqlite+aiosqlite:///...)
        echo: log every SQL statement through the sqlalchemy.engine logger
        pool_size: fixed pool capacity (no overflow connections)
        pool_timeout: seconds to wait for a free connection before failing
        pool_recycle: seconds after which a pooled connection is replaced on checkout
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 20,
        pool_timeout: float = 2.0,
        pool_recycle: int = 30,
    ):
        self.url = url

        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        # SQLite (tests, local runs) gets the dialect's default pool; pool sizing
        # arguments are rejected by StaticPool for in-memory databases.
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=0,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("database.engine_created", extra={"db_url": safe_db_url(url)})

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.SQLALCHEMY_DATABASE_URI,
            echo=settings.SQLALCHEMY_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session and make sure it is closed afterwards."""
        async with self.session_factory() as session:
            yield session

    async def create_schema(self) -> None:
        """Create every table registered on Base.metadata (no-op for existing tables)."""
        # models must be imported so their tables are registered on the metadata
        import postboard.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database.schema_created", extra={"tables": sorted(Base.metadata.tables)})

    async def drop_schema(self) -> None:
        import postboard.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("database.engine_disposed", extra={"db_url": safe_db_url(self.url)})
