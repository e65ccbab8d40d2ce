"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
and DocumentVersionModel with tree-level queries, slug checks and
sibling sort-order maintenance.

Dependencies: sqlalchemy, collabdoc.boundary.db.models
System role: Document hierarchy and version persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.boundary.db.models.document_model import DocumentModel, DocumentVersionModel
from collabdoc.boundary.db.CRUD.base_crud import BaseCRUD


def _parent_clause(parent_id: UUID | None):
    if parent_id is None:
        return DocumentModel.parent_id.is_(None)
    return DocumentModel.parent_id == parent_id


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Tree navigation is done by explicit parent_id queries rather than
    loaded collections.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_by_session(
        self,
        session: AsyncSession,
        session_id: UUID,
        parent_id: UUID | None = None,
        doc_type: str | None = None,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve one level of the document tree.

        Args:
            session: Async database session
            session_id: Session UUID
            parent_id: Parent document (None for root documents)
            doc_type: Optional type filter

        Returns:
            Documents ordered by sort_order ascending
        """
        stmt = select(DocumentModel).where(
            DocumentModel.session_id == session_id,
            _parent_clause(parent_id),
        )
        if doc_type:
            stmt = stmt.where(DocumentModel.type == doc_type)
        stmt = stmt.order_by(DocumentModel.sort_order.asc(), DocumentModel.created_at.asc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_all_by_session(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> Sequence[DocumentModel]:
        """All documents of a session, every tree level, by sort_order."""
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.session_id == session_id)
            .order_by(DocumentModel.sort_order.asc(), DocumentModel.created_at.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_children(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve the direct children of a document.

        Args:
            session: Async database session
            document_id: Parent document UUID

        Returns:
            Child documents ordered by sort_order
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.parent_id == document_id)
            .order_by(DocumentModel.sort_order.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_max_sort_order(
        self,
        session: AsyncSession,
        session_id: UUID,
        parent_id: UUID | None,
    ) -> int:
        """
        Highest sort_order among siblings.

        Returns:
            int: The maximum, or -1 when the level is empty
        """
        stmt = select(func.max(DocumentModel.sort_order)).where(
            DocumentModel.session_id == session_id,
            _parent_clause(parent_id),
        )
        result = await session.execute(stmt)
        value = result.scalar_one_or_none()
        return -1 if value is None else int(value)

    async def slug_exists(self, session: AsyncSession, session_id: UUID, slug: str) -> bool:
        return await self._count(
            session,
            DocumentModel.session_id == session_id,
            DocumentModel.slug == slug,
        ) > 0

    async def shift_sort_order(
        self,
        session: AsyncSession,
        session_id: UUID,
        parent_id: UUID | None,
        lower: int,
        upper: int,
        delta: int,
        exclude_id: UUID,
    ) -> int:
        """
        Add delta to the sort_order of siblings within [lower, upper].

        Args:
            session: Async database session
            session_id: Session UUID
            parent_id: Shared parent of the siblings
            lower: Inclusive lower bound
            upper: Inclusive upper bound
            delta: +1 or -1
            exclude_id: Document being moved (left untouched)

        Returns:
            int: Number of shifted rows
        """
        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.session_id == session_id,
                _parent_clause(parent_id),
                DocumentModel.id != exclude_id,
                DocumentModel.sort_order >= lower,
                DocumentModel.sort_order <= upper,
            )
            .values(sort_order=DocumentModel.sort_order + delta)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def count_by_session(self, session: AsyncSession, session_id: UUID) -> int:
        return await self._count(session, DocumentModel.session_id == session_id)


class DocumentVersionCRUD(BaseCRUD[DocumentVersionModel]):
    """CRUD operations for DocumentVersionModel (append-only)."""

    def __init__(self) -> None:
        """Initialize DocumentVersionCRUD with DocumentVersionModel."""
        super().__init__(DocumentVersionModel)

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[DocumentVersionModel]:
        """
        Retrieve all versions of a document.

        Returns:
            Versions ordered newest first
        """
        stmt = (
            select(DocumentVersionModel)
            .where(DocumentVersionModel.document_id == document_id)
            .order_by(DocumentVersionModel.version.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        return await self._count(session, DocumentVersionModel.document_id == document_id)

    async def delete_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        stmt = delete(DocumentVersionModel).where(DocumentVersionModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount


document_crud = DocumentCRUD()
document_version_crud = DocumentVersionCRUD()
