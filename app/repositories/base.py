"""
Shared data access for the swipe ledger and the identity-store tables.

Repositories never commit. Inserts are flushed so ids and server defaults
come back on the instance. SQLAlchemy failures are logged here and
re-raised; the services translate them into domain errors.
"""

from __future__ import annotations
from typing import Any, Generic, Mapping, Optional, Type, TypeVar
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    """
    Id-keyed access to one mapped table.

    Subclasses bind the model and add their own queries:

        class ProjectRepository(BaseRepository[Project]):
            def __init__(self):
                super().__init__(Project)
    """

    def __init__(self, model: Type[ModelT]):
        self.model = model

    @property
    def _name(self) -> str:
        return self.model.__name__

    async def get(self, db: AsyncSession, id: UUID) -> Optional[ModelT]:
        """
        Load one row by primary key.

        Args:
            db: Active database session
            id: Primary key

        Returns:
            The instance, or None when no row has that id
        """
        try:
            result = await db.execute(select(self.model).where(self.model.id == id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error loading {self._name} {id}: {e}")
            raise

    async def create(self, db: AsyncSession, values: Mapping[str, Any]) -> ModelT:
        """
        Insert a row and flush it.

        The session is rolled back on any failure so the caller can keep
        using it for follow-up reads.

        Raises:
            IntegrityError: A unique or check constraint rejected the row
            SQLAlchemyError: Any other store failure
        """
        instance = self.model(**values)
        try:
            db.add(instance)
            await db.flush()
            await db.refresh(instance)
        except IntegrityError as e:
            logger.warning(f"Constraint rejected new {self._name}: {e.orig}")
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error inserting {self._name}: {e}")
            await db.rollback()
            raise
        return instance

    async def exists(self, db: AsyncSession, id: UUID) -> bool:
        """True when a row with this primary key is present."""
        try:
            result = await db.execute(
                select(self.model.id).where(self.model.id == id).limit(1)
            )
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking {self._name} {id}: {e}")
            raise

    async def ping(self, db: AsyncSession) -> None:
        """Touch the table with a one-row read; raises if the store does not answer."""
        try:
            await db.execute(select(self.model.id).limit(1))
        except SQLAlchemyError as e:
            logger.error(f"Health probe on {self.model.__tablename__} failed: {e}")
            raise
