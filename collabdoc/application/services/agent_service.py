"""
Agent-facing facade.

Composes the document, annotation and decision services into the coarse
operations the AI agent adapter calls: reads return serialized dicts and
writes are attributed to the calling agent participant when known.

Dependencies: collabdoc.application.services
System role: Agent tool surface orchestration
"""

import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.application.services.annotation_service import AnnotationService
from collabdoc.application.services.base_service import BaseService
from collabdoc.application.services.decision_service import DecisionService
from collabdoc.application.services.document_service import DocumentService
from collabdoc.boundary.db.base import utcnow
from collabdoc.boundary.db.CRUD import (
    AnnotationFilters,
    annotation_crud,
    decision_crud,
    document_crud,
    participant_crud,
)
from collabdoc.boundary.db.models import AnnotationStatus, ParticipantModel
from collabdoc.boundary.db.models.participant_model import ONLINE_WINDOW_SECONDS
from collabdoc.boundary.notifications import MercurePublisher
from collabdoc.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

PRIORITY_ANNOTATION_LIMIT = 5


class AgentService(BaseService):
    """Agent operations built on the domain services."""

    def __init__(self, db: AsyncSession, publisher: MercurePublisher) -> None:
        super().__init__(db, publisher)
        self.documents = DocumentService(db, publisher)
        self.annotations = AnnotationService(db, publisher)
        self.decisions = DecisionService(db, publisher)

    async def _author(self, agent_id: UUID | None) -> ParticipantModel | None:
        return await self.get_participant_or_raise(agent_id) if agent_id else None

    async def list_documents(
        self,
        session_id: UUID,
        parent_id: UUID | None = None,
        doc_type: str | None = None,
    ) -> list[dict]:
        session = await self.get_session_or_raise(session_id)
        documents = await self.documents.list_documents(session.id, parent_id, doc_type)
        return [DocumentService.serialize(doc, include_content=False) for doc in documents]

    async def read_document(
        self,
        document_id: UUID,
        include_annotations: bool = False,
        include_versions: bool = False,
    ) -> dict:
        """
        Full document, optionally with its root annotations and version history.
        """
        document = await self.get_document_or_raise(document_id)
        data = DocumentService.serialize(document, include_content=True)

        if include_annotations:
            annotations = await self.annotations.list_for_document(document.id)
            data["annotations"] = await self.annotations.serialize_many(annotations)
        if include_versions:
            versions = await self.documents.get_versions(document)
            data["versions"] = await self.documents.serialize_versions(versions)
        return data

    async def create_document(
        self,
        session_id: UUID,
        data: dict[str, Any],
        agent_id: UUID | None = None,
    ) -> dict:
        session = await self.get_session_or_raise(session_id)
        author = await self._author(agent_id)
        document = await self.documents.create(session, data, author)
        return DocumentService.serialize(document)

    async def update_document(
        self,
        document_id: UUID,
        data: dict[str, Any],
        agent_id: UUID | None = None,
    ) -> dict:
        """Update a document; change_description is taken out of data."""
        document = await self.get_document_or_raise(document_id)
        author = await self._author(agent_id)
        data = dict(data)
        change_description = data.pop("change_description", None)
        document = await self.documents.update(document, data, author, change_description)
        return DocumentService.serialize(document)

    async def delete_document(self, document_id: UUID, agent_id: UUID | None = None) -> list[UUID]:
        document = await self.get_document_or_raise(document_id)
        deleted = await self.documents.delete(document)
        logger.info(
            "Document deleted by agent",
            extra={"document_id": str(document_id), "agent_id": str(agent_id) if agent_id else None},
        )
        return deleted

    async def read_annotations(
        self,
        document_id: UUID,
        filters: AnnotationFilters | None = None,
    ) -> list[dict]:
        document = await self.get_document_or_raise(document_id)
        annotations = await self.annotations.list_for_document(document.id, filters)
        return await self.annotations.serialize_many(annotations)

    async def get_session_annotations(
        self,
        session_id: UUID,
        filters: AnnotationFilters | None = None,
    ) -> list[dict]:
        session = await self.get_session_or_raise(session_id)
        annotations = await self.annotations.list_for_session(session.id, filters)
        return await self.annotations.serialize_many(annotations)

    async def respond_to_annotation(
        self,
        annotation_id: UUID,
        content: str,
        agent_id: UUID | None = None,
    ) -> dict:
        """
        Reply to an annotation as the agent.

        Raises:
            ValidationError: No agent participant identified
        """
        annotation = await self.get_annotation_or_raise(annotation_id)
        author = await self._author(agent_id)
        if author is None:
            raise ValidationError(
                "Un auteur est requis pour répondre à une annotation", field="participant_id"
            )
        reply = await self.annotations.create_reply(annotation, content, author)
        return await self.annotations.serialize(reply)

    async def acknowledge_annotation(self, annotation_id: UUID) -> dict:
        annotation = await self.get_annotation_or_raise(annotation_id)
        annotation = await self.annotations.mark_as_taken_into_account(annotation)
        return await self.annotations.serialize(annotation)

    async def get_session_status(self, session_id: UUID) -> dict:
        """
        Dashboard of a session for the agent.

        Returns:
            dict: session, statistics, decisions, priority_annotations
        """
        session = await self.get_session_or_raise(session_id)
        threshold = utcnow() - timedelta(seconds=ONLINE_WINDOW_SECONDS)
        online = await participant_crud.get_online(self.db, session.id, threshold)
        decisions = await decision_crud.get_by_session(self.db, session.id)
        priority = await annotation_crud.get_priority(
            self.db, session.id, limit=PRIORITY_ANNOTATION_LIMIT
        )

        return {
            "session": {
                "id": str(session.id),
                "title": session.title,
                "status": session.status,
            },
            "statistics": {
                "total_documents": await document_crud.count_by_session(self.db, session.id),
                "open_annotations": await annotation_crud.count_by_session_and_status(
                    self.db, session.id, AnnotationStatus.OPEN.value
                ),
                "untreated_annotations": await annotation_crud.count_untreated_by_session(
                    self.db, session.id
                ),
                "pending_decisions": await decision_crud.count_pending_by_session(self.db, session.id),
                "online_participants": len(online),
            },
            "decisions": await self.decisions.serialize_many(decisions),
            "priority_annotations": await self.annotations.serialize_many(priority),
        }
