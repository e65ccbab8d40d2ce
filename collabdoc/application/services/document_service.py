"""
Document service orchestrator.

Coordinates the document tree (creation with sibling ordering and unique
slugs, recursive deletion, reordering) and content versioning.

Dependencies: collabdoc.boundary.db.CRUD, collabdoc.boundary.notifications
System role: Document hierarchy and versioning use case orchestration
"""

import logging
import re
import unicodedata
from typing import Any, Sequence
from uuid import UUID

from collabdoc.application.services.base_service import BaseService, id_or_none, to_iso
from collabdoc.boundary.db.CRUD import (
    annotation_crud,
    decision_crud,
    document_crud,
    document_version_crud,
    participant_crud,
)
from collabdoc.boundary.db.models import (
    DocumentModel,
    DocumentType,
    DocumentVersionModel,
    ParticipantModel,
    SessionModel,
)
from collabdoc.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

DOCUMENT_TYPES = tuple(t.value for t in DocumentType)
INITIAL_VERSION_DESCRIPTION = "Version initiale"
AGENT_UPDATE_DESCRIPTION = "Mise à jour par l'agent IA"


def slugify(title: str) -> str:
    """
    ASCII, lowercase, dash-separated slug.

    >>> slugify("Étude de cas : Postgres")
    'etude-de-cas-postgres'
    """
    normalized = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug or "document"


def _validate_type(doc_type: str) -> None:
    if doc_type not in DOCUMENT_TYPES:
        raise ValidationError("Type de document invalide", field="type")


class DocumentService(BaseService):
    """Document service orchestrator."""

    async def create(
        self,
        session: SessionModel,
        data: dict[str, Any],
        author: ParticipantModel | None = None,
    ) -> DocumentModel:
        """
        Create a document and its version-1 snapshot.

        Args:
            session: Owning session
            data: title (required), content, type, metadata, parent_id, sort_order
            author: Participant credited with the initial version

        Returns:
            DocumentModel: The created document

        Raises:
            ValidationError: Missing title or unknown type
        """
        title = (data.get("title") or "").strip()
        if not title:
            raise ValidationError("Le titre est requis", field="title")

        doc_type = data.get("type") or DocumentType.GENERAL.value
        _validate_type(doc_type)

        parent_id = None
        if data.get("parent_id"):
            # Unknown parents are ignored and the document becomes a root
            parent = await document_crud.get_by_id(self.db, data["parent_id"])
            if parent is not None and parent.session_id == session.id:
                parent_id = parent.id

        sort_order = data.get("sort_order")
        if sort_order is None:
            sort_order = await document_crud.get_max_sort_order(self.db, session.id, parent_id) + 1

        document = await document_crud.create(
            self.db,
            session_id=session.id,
            parent_id=parent_id,
            title=title,
            slug=await self._generate_slug(session.id, title),
            content=data.get("content") or "",
            type=doc_type,
            doc_metadata=data.get("metadata"),
            sort_order=sort_order,
            current_version=1,
        )
        await self._create_version(document, author, INITIAL_VERSION_DESCRIPTION)
        await self.db.commit()

        logger.info(
            "Document created",
            extra={
                "session_id": str(session.id),
                "document_id": str(document.id),
                "slug": document.slug,
                "parent_id": id_or_none(parent_id),
            },
        )
        await self.publisher.publish_document_created(session.id, self.serialize(document))
        return document

    async def update(
        self,
        document: DocumentModel,
        data: dict[str, Any],
        author: ParticipantModel | None = None,
        change_description: str | None = None,
    ) -> DocumentModel:
        """
        Apply provided fields; version only on real content/metadata change.

        A field counts as provided when present and not None. A new version
        is appended only when content or metadata differs by value from the
        stored one, so title-only edits never bump current_version.

        Args:
            document: Document to update
            data: Any of title, content, type, metadata, sort_order
            author: Participant making the change
            change_description: Optional summary stored on the new version

        Returns:
            DocumentModel: The updated document
        """
        content = data.get("content")
        metadata = data.get("metadata")
        content_changed = content is not None and content != document.content
        metadata_changed = metadata is not None and metadata != document.doc_metadata

        if data.get("title") is not None:
            title = data["title"].strip()
            if not title:
                raise ValidationError("Le titre est requis", field="title")
            document.title = title
        if content is not None:
            document.content = content
        if data.get("type") is not None:
            _validate_type(data["type"])
            document.type = data["type"]
        if metadata is not None:
            document.doc_metadata = metadata
        if data.get("sort_order") is not None:
            document.sort_order = data["sort_order"]

        if content_changed or metadata_changed:
            document.current_version += 1
            if change_description is None and author is not None and author.is_agent:
                change_description = AGENT_UPDATE_DESCRIPTION
            await self._create_version(document, author, change_description)

        await self.db.flush()
        await self.db.commit()

        logger.info(
            "Document updated",
            extra={
                "document_id": str(document.id),
                "new_version": content_changed or metadata_changed,
                "current_version": document.current_version,
            },
        )
        await self.publisher.publish_document_updated(
            document.session_id, document.id, self.serialize(document)
        )
        return document

    async def delete(self, document: DocumentModel) -> list[UUID]:
        """
        Delete a document and all its descendants, depth-first.

        Annotations and versions go with each node; decisions linked to a
        removed node stay with linked_document_id cleared.

        Returns:
            list[UUID]: Ids of every deleted document, children first
        """
        session_id = document.session_id
        deleted = await self._delete_subtree(document)
        await self.db.commit()

        logger.info(
            "Document deleted",
            extra={"document_id": str(deleted[-1]), "deleted_count": len(deleted)},
        )
        for document_id in deleted:
            await self.publisher.publish_document_deleted(session_id, document_id)
        return deleted

    async def _delete_subtree(self, document: DocumentModel) -> list[UUID]:
        deleted: list[UUID] = []
        for child in await document_crud.get_children(self.db, document.id):
            deleted.extend(await self._delete_subtree(child))

        document_id = document.id
        await annotation_crud.delete_by_document(self.db, document_id)
        await document_version_crud.delete_by_document(self.db, document_id)
        await decision_crud.unlink_document(self.db, document_id)
        await document_crud.delete(self.db, document)
        deleted.append(document_id)
        return deleted

    async def reorder(self, document: DocumentModel, new_position: int) -> DocumentModel:
        """
        Move a document to new_position among its siblings.

        Siblings between the old and new position shift by one towards the
        vacated slot. No locking: concurrent reorders may interleave.
        """
        if new_position < 0:
            raise ValidationError("Position invalide", field="position")

        current = document.sort_order
        if new_position == current:
            return document

        if new_position > current:
            await document_crud.shift_sort_order(
                self.db, document.session_id, document.parent_id,
                current + 1, new_position, -1, document.id,
            )
        else:
            await document_crud.shift_sort_order(
                self.db, document.session_id, document.parent_id,
                new_position, current - 1, 1, document.id,
            )
        document.sort_order = new_position
        await self.db.commit()

        logger.info(
            "Document reordered",
            extra={"document_id": str(document.id), "from": current, "to": new_position},
        )
        await self.publisher.publish_document_updated(
            document.session_id, document.id, self.serialize(document, include_content=False)
        )
        return document

    async def list_documents(
        self,
        session_id: UUID,
        parent_id: UUID | None = None,
        doc_type: str | None = None,
    ) -> Sequence[DocumentModel]:
        """One level of the tree (roots when parent_id is None), by sort_order."""
        return await document_crud.get_by_session(self.db, session_id, parent_id, doc_type)

    async def get_tree(self, session_id: UUID) -> list[dict]:
        """
        Nested representation of every document of a session.

        Returns:
            list[dict]: Root documents (without content), each with "children"
        """
        documents = await document_crud.get_all_by_session(self.db, session_id)
        nodes = {doc.id: {**self.serialize(doc, include_content=False), "children": []} for doc in documents}
        roots = []
        for doc in documents:
            if doc.parent_id is not None and doc.parent_id in nodes:
                nodes[doc.parent_id]["children"].append(nodes[doc.id])
            else:
                roots.append(nodes[doc.id])
        return roots

    async def get_versions(self, document: DocumentModel) -> Sequence[DocumentVersionModel]:
        return await document_version_crud.get_by_document(self.db, document.id)

    async def serialize_versions(
        self,
        versions: Sequence[DocumentVersionModel],
        include_content: bool = False,
    ) -> list[dict]:
        """Versions with the author's pseudo resolved."""
        authors = await participant_crud.get_many_by_ids(
            self.db, [v.author_id for v in versions if v.author_id]
        )
        result = []
        for version in versions:
            author = authors.get(version.author_id)
            data = {
                "id": str(version.id),
                "version": version.version,
                "author": author.pseudo if author else None,
                "change_description": version.change_description,
                "created_at": to_iso(version.created_at),
            }
            if include_content:
                data["content"] = version.content
                data["metadata"] = version.doc_metadata
            result.append(data)
        return result

    async def _create_version(
        self,
        document: DocumentModel,
        author: ParticipantModel | None,
        change_description: str | None,
    ) -> DocumentVersionModel:
        return await document_version_crud.create(
            self.db,
            document_id=document.id,
            version=document.current_version,
            content=document.content,
            doc_metadata=document.doc_metadata,
            author_id=author.id if author else None,
            change_description=change_description,
        )

    async def _generate_slug(self, session_id: UUID, title: str) -> str:
        base_slug = slugify(title)
        slug = base_slug
        counter = 1
        while await document_crud.slug_exists(self.db, session_id, slug):
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    @staticmethod
    def serialize(document: DocumentModel, include_content: bool = True) -> dict:
        data = {
            "id": str(document.id),
            "session_id": str(document.session_id),
            "title": document.title,
            "slug": document.slug,
            "type": document.type,
            "parent_id": id_or_none(document.parent_id),
            "sort_order": document.sort_order,
            "current_version": document.current_version,
            "created_at": to_iso(document.created_at),
            "updated_at": to_iso(document.updated_at),
        }
        if include_content:
            data["content"] = document.content
            data["metadata"] = document.doc_metadata
        return data
