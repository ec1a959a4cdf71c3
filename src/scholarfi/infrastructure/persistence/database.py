"""
Async SQLAlchemy engine and session handling.

Holds the reconciliation cursor and idempotency records. PostgreSQL
(asyncpg) in production, SQLite (aiosqlite) for development and tests.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from scholarfi.infrastructure.monitoring import get_logger
from scholarfi.infrastructure.persistence.models import Base

logger = get_logger(__name__)


class Database:
    """
    Owns one AsyncEngine per process.

    Created lazily by the DI container and connected during application
    startup.
    """

    def __init__(self, database_url: str, echo: bool = False, pool_size: int = 5):
        """
        Args:
            database_url: SQLAlchemy async URL
            echo: Log emitted SQL
            pool_size: Pooled connections (ignored for SQLite)
        """
        self.database_url = database_url
        self.echo = echo
        self.pool_size = pool_size
        self._engine: Optional[AsyncEngine] = None
        self._sessions: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._engine

    def _engine_options(self) -> dict:
        if self.is_sqlite:
            return {"echo": self.echo, "connect_args": {"timeout": 30}}
        return {
            "echo": self.echo,
            "pool_size": self.pool_size,
            "max_overflow": self.pool_size,
            "pool_pre_ping": True,
            "pool_recycle": 1800,
        }

    async def connect(self) -> None:
        if self._engine is not None:
            return
        self._engine = create_async_engine(self.database_url, **self._engine_options())
        self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)
        logger.info(f"Database engine created ({self._engine.dialect.name})")

    async def create_tables(self) -> None:
        """Create missing tables. Existing tables are left untouched."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessions = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Transactional session: committed on normal exit, rolled back if
        the block raises.
        """
        if self._sessions is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        async with self._sessions.begin() as session:
            yield session

    async def health_check(self) -> bool:
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False
        return True
