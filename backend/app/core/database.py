"""
Product Store Database Configuration

Async SQLAlchemy connection management for the authoritative product store:
- Engine and session factory created once per process
- Startup connectivity probe with retry and exponential backoff
- Per-request sessions with rollback on failure
- Pool metrics and health reporting
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Any, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from .config import Settings, get_settings
from ..monitoring.metrics import DB_SESSION_DURATION

logger = structlog.get_logger(__name__)


class DatabaseManager:
    """
    Database connection manager for the product store.

    Owns the engine and session factory; sessions are handed out per
    request and never shared between tasks.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _create_engine(self) -> AsyncEngine:
        """Create the async engine; SQLite gets no pool sizing."""
        engine_kwargs: Dict[str, Any] = {
            "echo": self.settings.DATABASE_ECHO,
            "pool_pre_ping": True,
        }
        if not self.settings.uses_sqlite:
            engine_kwargs.update(
                pool_size=self.settings.DATABASE_POOL_SIZE,
                max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
                pool_timeout=self.settings.DATABASE_POOL_TIMEOUT,
                pool_recycle=3600,
            )

        return create_async_engine(self.settings.database_url, **engine_kwargs)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((OperationalError, ConnectionError, OSError)),
        before_sleep=lambda retry_state: logger.warning(
            "Database connection retry",
            attempt=retry_state.attempt_number,
            wait_time=retry_state.next_action.sleep,
        ),
        reraise=True,
    )
    async def _probe_database(self) -> None:
        """Verify the store answers a trivial query."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def initialize(self) -> None:
        """Create engine and session factory, then probe connectivity."""
        if self.engine is not None:
            return

        start_time = time.time()

        try:
            self.engine = self._create_engine()
            self.session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            await self._probe_database()

            logger.info(
                "Database initialized",
                duration_seconds=round(time.time() - start_time, 3),
                sqlite=self.settings.uses_sqlite,
            )

        except Exception as e:
            logger.error(
                "Database initialization failed",
                error=str(e),
                exc_info=True,
            )
            if self.engine is not None:
                await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            raise

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session.

        Writes are committed by the repository that performs them; any
        exception escaping the block rolls back what is still pending.
        """
        if not self.session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        start_time = time.time()

        try:
            async with self.session_factory() as session:
                try:
                    yield session
                except Exception as e:
                    await session.rollback()
                    logger.error(
                        "Database session failed",
                        error=str(e),
                        exc_info=True,
                    )
                    raise
        finally:
            DB_SESSION_DURATION.observe(time.time() - start_time)

    async def health_check(self) -> Dict[str, Any]:
        """Run a trivial query and report latency."""
        start_time = time.time()

        try:
            async with self.get_session() as session:
                result = await session.execute(text("SELECT 1"))
                if result.scalar() != 1:
                    raise RuntimeError("Database probe returned unexpected result")

            return {
                "status": "healthy",
                "duration_seconds": round(time.time() - start_time, 4),
            }

        except Exception as e:
            logger.error(
                "Database health check failed",
                error=str(e),
            )
            return {
                "status": "unhealthy",
                "duration_seconds": round(time.time() - start_time, 4),
                "error": str(e),
            }

    async def close(self) -> None:
        """Close database connections and cleanup resources."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None

            logger.info("Database connections closed")


# Global database manager instance
database_manager = DatabaseManager()


async def get_database_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a per-request database session."""
    async with database_manager.get_session() as session:
        yield session
