"""
Shared service plumbing.

Holds the database session and notification publisher every service needs,
plus lookups that raise typed not-found errors.

Dependencies: sqlalchemy, collabdoc.boundary, collabdoc.core.exceptions
System role: Base class for use case services
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.boundary.db.base import ensure_utc
from collabdoc.boundary.db.CRUD import (
    annotation_crud,
    decision_crud,
    document_crud,
    participant_crud,
    session_crud,
)
from collabdoc.boundary.db.models import (
    AnnotationModel,
    DecisionModel,
    DocumentModel,
    ParticipantModel,
    SessionModel,
)
from collabdoc.boundary.notifications import MercurePublisher
from collabdoc.core.exceptions import (
    AnnotationNotFoundError,
    DecisionNotFoundError,
    DocumentNotFoundError,
    ParticipantNotFoundError,
    SessionNotFoundError,
)


def to_iso(value: datetime | None) -> str | None:
    """ISO-8601 UTC rendering of a stored timestamp."""
    value = ensure_utc(value)
    return value.isoformat() if value else None


def id_or_none(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


class BaseService:
    """Common constructor and entity lookups."""

    def __init__(self, db: AsyncSession, publisher: MercurePublisher) -> None:
        """
        Initialize service with async database session and publisher.

        Args:
            db: Async SQLAlchemy session
            publisher: Mercure publisher for change notifications
        """
        self.db = db
        self.publisher = publisher

    async def get_session_or_raise(self, session_id: UUID) -> SessionModel:
        session = await session_crud.get_by_id(self.db, session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def find_document(self, document_id: UUID) -> DocumentModel | None:
        return await document_crud.get_by_id(self.db, document_id)

    async def get_document_or_raise(self, document_id: UUID) -> DocumentModel:
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def get_participant_or_raise(self, participant_id: UUID) -> ParticipantModel:
        participant = await participant_crud.get_by_id(self.db, participant_id)
        if participant is None:
            raise ParticipantNotFoundError(participant_id)
        return participant

    async def get_annotation_or_raise(self, annotation_id: UUID) -> AnnotationModel:
        annotation = await annotation_crud.get_by_id(self.db, annotation_id)
        if annotation is None:
            raise AnnotationNotFoundError(annotation_id)
        return annotation

    async def get_decision_or_raise(self, decision_id: UUID) -> DecisionModel:
        decision = await decision_crud.get_by_id(self.db, decision_id)
        if decision is None:
            raise DecisionNotFoundError(decision_id)
        return decision
