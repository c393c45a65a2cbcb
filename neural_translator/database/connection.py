"""
Database connection management for the local translation history store.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from neural_translator.config.config import config
from neural_translator.utils.exceptions import DatabaseError
from neural_translator.utils.logging import TranslationLogger

logger = TranslationLogger(__name__, "database")


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


class DatabaseManager:
    """Owns the async engine and session factory for one SQLite database."""

    def __init__(self, database_url: str = None):
        self.database_url = database_url or config.history.database_url
        self._engine = None
        self._session_factory = None

    def _engine_options(self) -> dict:
        url = make_url(self.database_url)
        if url.database in (None, "", ":memory:"):
            # every session must see the same in-memory database
            return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}

        directory = os.path.dirname(url.database)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return {}

    async def initialize(self):
        """Create the engine, the session factory and any missing tables."""
        if self._engine is not None:
            return

        try:
            self._engine = create_async_engine(self.database_url, **self._engine_options())
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False
            )

            # register table metadata before create_all
            from neural_translator.database import models  # noqa: F401

            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            logger.info("History database initialized", metadata={"url": self.database_url})

        except Exception as e:
            self._engine = None
            self._session_factory = None
            logger.error(f"Failed to initialize history database: {str(e)}", exc_info=True)
            raise DatabaseError(f"Database initialization failed: {str(e)}", "initialize")

    async def close(self):
        """Dispose the engine."""
        try:
            if self._engine:
                await self._engine.dispose()
            logger.info("History database closed")
        except Exception as e:
            logger.error(f"Error closing history database: {str(e)}", exc_info=True)
        finally:
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on error."""
        if not self._session_factory:
            raise DatabaseError("Database not initialized", "get_session")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except DatabaseError:
                await session.rollback()
                raise
            except Exception as e:
                await session.rollback()
                logger.error(f"Database session error: {str(e)}", exc_info=True)
                raise DatabaseError(f"Database operation failed: {str(e)}", "session")

    async def health_check(self) -> bool:
        """Check database connectivity."""
        if not self._engine:
            return False
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False

    @property
    def engine(self):
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._session_factory is not None
