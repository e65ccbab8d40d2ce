"""
Base CRUD operations for SQLAlchemy models.

Provides generic create, read and delete operations that can be
inherited and extended by model-specific CRUD classes.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Generic, TypeVar, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Provides standard database operations that work with any SQLAlchemy model.
    Writes only flush; committing is the calling service's responsibility.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Create a new record in the database.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance with generated ID and timestamps
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            id: UUID primary key

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many_by_ids(
        self,
        session: AsyncSession,
        ids: Sequence[UUID],
    ) -> dict[UUID, ModelT]:
        """
        Retrieve several records at once, keyed by id.

        Args:
            session: Async database session
            ids: Primary keys to load (duplicates and unknown ids ignored)

        Returns:
            Mapping of id to model instance for the rows that exist
        """
        unique_ids = list({i for i in ids if i is not None})
        if not unique_ids:
            return {}
        stmt = select(self.model).where(self.model.id.in_(unique_ids))
        result = await session.execute(stmt)
        return {row.id: row for row in result.scalars().all()}

    async def delete(self, session: AsyncSession, instance: ModelT) -> None:
        """
        Delete a loaded instance and flush.

        Args:
            session: Async database session
            instance: Persistent model instance
        """
        await session.delete(instance)
        await session.flush()

    async def _count(self, session: AsyncSession, *criteria) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        result = await session.execute(stmt)
        return int(result.scalar_one())
