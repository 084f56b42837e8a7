"""
Product Store Database Access

Lifecycle and FastAPI dependency entry points, delegating to the
DatabaseManager in core.database.
"""

from typing import Any, Dict
import structlog

from ..core.database import database_manager, get_database_session
from ..models import Base

logger = structlog.get_logger(__name__)


async def init_database() -> None:
    """Initialize the engine and session factory for the product store."""
    try:
        await database_manager.initialize()
    except Exception:
        logger.exception("Failed to initialize database")
        raise


async def get_database_health() -> Dict[str, Any]:
    """Get database health information."""
    return await database_manager.health_check()


async def close_database() -> None:
    """Close database connections and cleanup resources."""
    try:
        await database_manager.close()
    except Exception:
        logger.exception("Failed to close database connections")
        raise


__all__ = [
    "Base",
    "init_database",
    "get_database_session",
    "get_database_health",
    "close_database",
]
