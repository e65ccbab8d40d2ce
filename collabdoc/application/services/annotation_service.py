"""
Annotation service orchestrator.

Coordinates threaded annotations on documents: creation, replies,
@mention resolution and status changes.

Dependencies: collabdoc.boundary.db.CRUD, collabdoc.boundary.notifications
System role: Annotation use case orchestration
"""

import logging
import re
from typing import Sequence
from uuid import UUID

from collabdoc.application.services.base_service import BaseService, id_or_none, to_iso
from collabdoc.boundary.db.CRUD import (
    AnnotationFilters,
    annotation_crud,
    participant_crud,
)
from collabdoc.boundary.db.models import (
    AnnotationModel,
    AnnotationStatus,
    AnnotationType,
    DocumentModel,
    ParticipantModel,
)
from collabdoc.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"@(\w+)")
ANNOTATION_TYPES = tuple(t.value for t in AnnotationType)
ANNOTATION_STATUSES = tuple(s.value for s in AnnotationStatus)


class AnnotationService(BaseService):
    """Annotation service orchestrator."""

    async def create(
        self,
        document: DocumentModel,
        author: ParticipantModel,
        content: str,
        annotation_type: str = AnnotationType.COMMENT.value,
        anchor: dict | None = None,
    ) -> AnnotationModel:
        """
        Create a root annotation on a document.

        Args:
            document: Annotated document
            author: Authoring participant
            content: Annotation text, may contain @pseudo mentions
            annotation_type: One of the annotation types (default comment)
            anchor: Optional selection anchor

        Returns:
            AnnotationModel: Created annotation (status open)

        Raises:
            ValidationError: Unknown annotation type
        """
        if annotation_type not in ANNOTATION_TYPES:
            raise ValidationError("Type d'annotation invalide", field="type")

        annotation = await annotation_crud.create(
            self.db,
            document_id=document.id,
            author_id=author.id,
            content=content,
            type=annotation_type,
            status=AnnotationStatus.OPEN.value,
            anchor=anchor,
            mentions=await self.extract_mentions(content, document.session_id),
        )
        await self.db.commit()

        logger.info(
            "Annotation created",
            extra={
                "annotation_id": str(annotation.id),
                "document_id": str(document.id),
                "type": annotation_type,
            },
        )
        await self.publisher.publish_annotation_created(
            document.session_id, document.id, await self.serialize(annotation)
        )
        return annotation

    async def create_reply(
        self,
        parent: AnnotationModel,
        content: str,
        author: ParticipantModel,
    ) -> AnnotationModel:
        """
        Reply to an annotation.

        The reply is a comment on the parent's document.

        Returns:
            AnnotationModel: The reply
        """
        document = await self.get_document_or_raise(parent.document_id)
        reply = await annotation_crud.create(
            self.db,
            document_id=document.id,
            author_id=author.id,
            parent_annotation_id=parent.id,
            content=content,
            type=AnnotationType.COMMENT.value,
            status=AnnotationStatus.OPEN.value,
            mentions=await self.extract_mentions(content, document.session_id),
        )
        await self.db.commit()

        logger.info(
            "Annotation reply created",
            extra={"annotation_id": str(reply.id), "parent_id": str(parent.id)},
        )
        await self.publisher.publish_annotation_created(
            document.session_id, document.id, await self.serialize(reply)
        )
        return reply

    async def update(self, annotation: AnnotationModel, content: str) -> AnnotationModel:
        """Replace the content and recompute mentions."""
        session_id = await self._session_id_of(annotation)
        annotation.content = content
        annotation.mentions = await self.extract_mentions(content, session_id)
        await self.db.commit()

        logger.info("Annotation updated", extra={"annotation_id": str(annotation.id)})
        await self.publisher.publish_annotation_updated(session_id, await self.serialize(annotation))
        return annotation

    async def resolve(self, annotation: AnnotationModel, participant: ParticipantModel) -> AnnotationModel:
        """Mark resolved and record the resolver."""
        session_id = await self._session_id_of(annotation)
        annotation.status = AnnotationStatus.RESOLVED.value
        annotation.resolved_by_id = participant.id
        await self.db.commit()

        logger.info(
            "Annotation resolved",
            extra={"annotation_id": str(annotation.id), "resolved_by": str(participant.id)},
        )
        await self.publisher.publish_annotation_resolved(
            session_id, annotation.document_id, await self.serialize(annotation)
        )
        return annotation

    async def mark_as_taken_into_account(self, annotation: AnnotationModel) -> AnnotationModel:
        session_id = await self._session_id_of(annotation)
        annotation.taken_into_account = True
        await self.db.commit()

        logger.info("Annotation acknowledged", extra={"annotation_id": str(annotation.id)})
        await self.publisher.publish_annotation_updated(session_id, await self.serialize(annotation))
        return annotation

    async def set_status(self, annotation: AnnotationModel, status: str) -> AnnotationModel:
        """
        Set any status from any status (no transition guard).

        Raises:
            ValidationError: Unknown status
        """
        if status not in ANNOTATION_STATUSES:
            raise ValidationError("Statut invalide", field="status")

        session_id = await self._session_id_of(annotation)
        annotation.status = status
        await self.db.commit()

        logger.info(
            "Annotation status changed",
            extra={"annotation_id": str(annotation.id), "status": status},
        )
        await self.publisher.publish_annotation_updated(session_id, await self.serialize(annotation))
        return annotation

    async def get_replies(self, annotation: AnnotationModel) -> Sequence[AnnotationModel]:
        """Direct replies only; deeper threads are not walked."""
        return await annotation_crud.get_replies(self.db, annotation.id)

    async def list_for_document(
        self,
        document_id: UUID,
        filters: AnnotationFilters | None = None,
    ) -> Sequence[AnnotationModel]:
        return await annotation_crud.get_by_document(self.db, document_id, filters)

    async def list_for_session(
        self,
        session_id: UUID,
        filters: AnnotationFilters | None = None,
    ) -> Sequence[AnnotationModel]:
        return await annotation_crud.get_by_session(self.db, session_id, filters)

    async def extract_mentions(self, content: str, session_id: UUID) -> list[str]:
        """
        Resolve @pseudo tokens to participant ids of the session.

        Unknown names are dropped; the result keeps first-mention order
        without duplicates.
        """
        names = MENTION_PATTERN.findall(content or "")
        if not names:
            return []
        participants = await participant_crud.get_by_session_and_pseudos(self.db, session_id, names)
        by_pseudo = {p.pseudo: str(p.id) for p in participants}

        mentions: list[str] = []
        for name in names:
            participant_id = by_pseudo.get(name)
            if participant_id and participant_id not in mentions:
                mentions.append(participant_id)
        return mentions

    async def serialize(self, annotation: AnnotationModel) -> dict:
        return (await self.serialize_many([annotation]))[0]

    async def serialize_many(self, annotations: Sequence[AnnotationModel]) -> list[dict]:
        """
        Serialize annotations with author, resolver and reply counts.

        Participants and reply counts are loaded in one query each.
        """
        participant_ids = [a.author_id for a in annotations]
        participant_ids += [a.resolved_by_id for a in annotations if a.resolved_by_id]
        participants = await participant_crud.get_many_by_ids(self.db, participant_ids)
        reply_counts = await annotation_crud.count_replies(self.db, [a.id for a in annotations])

        result = []
        for annotation in annotations:
            author = participants.get(annotation.author_id)
            resolver = participants.get(annotation.resolved_by_id)
            result.append({
                "id": str(annotation.id),
                "content": annotation.content,
                "type": annotation.type,
                "status": annotation.status,
                "anchor": annotation.anchor,
                "author": {
                    "id": str(author.id),
                    "pseudo": author.pseudo,
                    "color": author.color,
                    "is_agent": author.is_agent,
                } if author else None,
                "document_id": str(annotation.document_id),
                "parent_id": id_or_none(annotation.parent_annotation_id),
                "mentions": list(annotation.mentions or []),
                "taken_into_account": annotation.taken_into_account,
                "resolved_by": resolver.pseudo if resolver else None,
                "created_at": to_iso(annotation.created_at),
                "updated_at": to_iso(annotation.updated_at),
                "reply_count": reply_counts.get(annotation.id, 0),
            })
        return result

    async def _session_id_of(self, annotation: AnnotationModel) -> UUID:
        document = await self.get_document_or_raise(annotation.document_id)
        return document.session_id
