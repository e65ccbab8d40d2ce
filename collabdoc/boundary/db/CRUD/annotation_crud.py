"""
Annotation CRUD operations.

Listing queries only return root annotations (no parent); replies are
loaded one level at a time with get_replies.

Dependencies: sqlalchemy, collabdoc.boundary.db.models
System role: Annotation persistence operations
"""

from dataclasses import dataclass
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.boundary.db.models.annotation_model import (
    AnnotationModel,
    AnnotationStatus,
    AnnotationType,
)
from collabdoc.boundary.db.models.document_model import DocumentModel
from collabdoc.boundary.db.CRUD.base_crud import BaseCRUD

PRIORITY_TYPES = (AnnotationType.QUESTION.value, AnnotationType.OBJECTION.value)


@dataclass
class AnnotationFilters:
    """Optional filters for annotation listings."""

    type: str | None = None
    status: str | None = None
    untreated_only: bool = False
    author_id: UUID | None = None
    document_id: UUID | None = None


def _untreated_criteria():
    return (
        AnnotationModel.taken_into_account.is_(False),
        AnnotationModel.status != AnnotationStatus.RESOLVED.value,
    )


class AnnotationCRUD(BaseCRUD[AnnotationModel]):
    """CRUD operations for AnnotationModel."""

    def __init__(self) -> None:
        """Initialize AnnotationCRUD with AnnotationModel."""
        super().__init__(AnnotationModel)

    @staticmethod
    def _apply_filters(stmt, filters: AnnotationFilters | None):
        if filters is None:
            return stmt
        if filters.type:
            stmt = stmt.where(AnnotationModel.type == filters.type)
        if filters.status:
            stmt = stmt.where(AnnotationModel.status == filters.status)
        if filters.untreated_only:
            stmt = stmt.where(*_untreated_criteria())
        if filters.author_id:
            stmt = stmt.where(AnnotationModel.author_id == filters.author_id)
        if filters.document_id:
            stmt = stmt.where(AnnotationModel.document_id == filters.document_id)
        return stmt

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
        filters: AnnotationFilters | None = None,
    ) -> Sequence[AnnotationModel]:
        """
        Root annotations of a document.

        Args:
            session: Async database session
            document_id: Document UUID
            filters: Optional type/status/untreated/author filters

        Returns:
            Root annotations, newest first
        """
        stmt = select(AnnotationModel).where(
            AnnotationModel.document_id == document_id,
            AnnotationModel.parent_annotation_id.is_(None),
        )
        stmt = self._apply_filters(stmt, filters).order_by(AnnotationModel.created_at.desc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_session(
        self,
        session: AsyncSession,
        session_id: UUID,
        filters: AnnotationFilters | None = None,
    ) -> Sequence[AnnotationModel]:
        """
        Root annotations across every document of a session.

        Returns:
            Root annotations, newest first
        """
        stmt = (
            select(AnnotationModel)
            .join(DocumentModel, DocumentModel.id == AnnotationModel.document_id)
            .where(
                DocumentModel.session_id == session_id,
                AnnotationModel.parent_annotation_id.is_(None),
            )
        )
        stmt = self._apply_filters(stmt, filters).order_by(AnnotationModel.created_at.desc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_replies(
        self,
        session: AsyncSession,
        annotation_id: UUID,
    ) -> Sequence[AnnotationModel]:
        """Direct replies of an annotation, oldest first."""
        stmt = (
            select(AnnotationModel)
            .where(AnnotationModel.parent_annotation_id == annotation_id)
            .order_by(AnnotationModel.created_at.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_replies(
        self,
        session: AsyncSession,
        annotation_ids: Sequence[UUID],
    ) -> dict[UUID, int]:
        """Reply counts keyed by parent annotation id (missing means 0)."""
        if not annotation_ids:
            return {}
        stmt = (
            select(AnnotationModel.parent_annotation_id, func.count())
            .where(AnnotationModel.parent_annotation_id.in_(list(annotation_ids)))
            .group_by(AnnotationModel.parent_annotation_id)
        )
        result = await session.execute(stmt)
        return {parent_id: int(count) for parent_id, count in result.all()}

    async def count_by_session_and_status(
        self,
        session: AsyncSession,
        session_id: UUID,
        status: str,
    ) -> int:
        stmt = (
            select(func.count(AnnotationModel.id))
            .join(DocumentModel, DocumentModel.id == AnnotationModel.document_id)
            .where(DocumentModel.session_id == session_id, AnnotationModel.status == status)
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def count_untreated_by_session(self, session: AsyncSession, session_id: UUID) -> int:
        """Root annotations neither acknowledged nor resolved."""
        stmt = (
            select(func.count(AnnotationModel.id))
            .join(DocumentModel, DocumentModel.id == AnnotationModel.document_id)
            .where(
                DocumentModel.session_id == session_id,
                AnnotationModel.parent_annotation_id.is_(None),
                *_untreated_criteria(),
            )
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def get_priority(
        self,
        session: AsyncSession,
        session_id: UUID,
        limit: int = 5,
    ) -> Sequence[AnnotationModel]:
        """
        Untreated root questions and objections of a session.

        Returns:
            Annotations oldest first, at most limit
        """
        stmt = (
            select(AnnotationModel)
            .join(DocumentModel, DocumentModel.id == AnnotationModel.document_id)
            .where(
                DocumentModel.session_id == session_id,
                AnnotationModel.parent_annotation_id.is_(None),
                AnnotationModel.type.in_(PRIORITY_TYPES),
                *_untreated_criteria(),
            )
            .order_by(AnnotationModel.created_at.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """
        Remove every annotation of a document, replies first.

        Returns:
            int: Number of deleted rows
        """
        replies = await session.execute(
            delete(AnnotationModel).where(
                AnnotationModel.document_id == document_id,
                AnnotationModel.parent_annotation_id.is_not(None),
            )
        )
        roots = await session.execute(
            delete(AnnotationModel).where(AnnotationModel.document_id == document_id)
        )
        return replies.rowcount + roots.rowcount


annotation_crud = AnnotationCRUD()
