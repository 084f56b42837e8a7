"""
Base Repository

Generic SQLAlchemy access shared by store repositories: lookup by primary
key, full listing, and commit/rollback around writes. All errors are logged
with full context and re-raised.
"""

from typing import Any, Optional, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import structlog

from app.models import Base

logger = structlog.get_logger(__name__)


class BaseRepository:
    """
    Base repository over a single SQLAlchemy model.

    Each repository instance is bound to one request-scoped AsyncSession.
    """

    def __init__(self, session: AsyncSession, model: Type[Base]):
        """
        Initialize repository with strict input validation.

        Args:
            session: AsyncSession for database operations
            model: SQLAlchemy model class

        Raises:
            TypeError: If session is not AsyncSession or model is invalid
        """
        if not isinstance(session, AsyncSession):
            raise TypeError(
                f"session must be AsyncSession instance, got {type(session).__name__}"
            )

        if not model or not hasattr(model, "__tablename__"):
            raise TypeError(
                f"model must be valid SQLAlchemy model with __tablename__, got {type(model).__name__}"
            )

        self.session = session
        self.model = model

    async def get_row(self, id: Any) -> Optional[Base]:
        """
        Get a row by primary key.

        Uses the session identity map, so a second lookup of the same id in
        one session does not hit the database again.
        """
        if id is None:
            raise ValueError("Entity id is required (cannot be None)")

        try:
            row = await self.session.get(self.model, id)

            logger.debug(
                "Repository: Entity lookup",
                model=self.model.__name__,
                entity_id=id,
                found=row is not None,
            )

            return row

        except Exception as e:
            logger.error(
                "Repository: Failed to get entity",
                model=self.model.__name__,
                entity_id=id,
                error=str(e),
                exc_info=True,
            )
            raise

    async def list_rows(self) -> list[Base]:
        """List every row ordered by primary key."""
        try:
            stmt = select(self.model).order_by(self.model.id)
            result = await self.session.execute(stmt)
            rows = list(result.scalars().all())

            logger.debug(
                "Repository: Entities listed",
                model=self.model.__name__,
                count=len(rows),
            )

            return rows

        except Exception as e:
            logger.error(
                "Repository: Failed to list entities",
                model=self.model.__name__,
                error=str(e),
                exc_info=True,
            )
            raise

    async def commit(self, action: str, entity_id: Any) -> None:
        """Commit pending changes, rolling back on failure."""
        try:
            await self.session.commit()

            logger.info(
                f"Repository: Entity {action}",
                model=self.model.__name__,
                entity_id=entity_id,
            )

        except Exception as e:
            await self.session.rollback()
            logger.error(
                f"Repository: Failed to commit {action}",
                model=self.model.__name__,
                entity_id=entity_id,
                error=str(e),
                exc_info=True,
            )
            raise
