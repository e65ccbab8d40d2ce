"""
Document ORM models.

Documents form a tree inside a session (parent_id self reference) and keep
an append-only list of version snapshots.

Dependencies: sqlalchemy, collabdoc.boundary.db.base
System role: Document hierarchy and version persistence
"""

import enum
import uuid

from sqlalchemy import ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from collabdoc.boundary.db.base import Base, UUIDMixin, TimestampMixin


class DocumentType(str, enum.Enum):
    """Document kinds, each rendered with its own label on export."""

    GENERAL = "general"
    SYNTHESIS = "synthesis"
    QUESTION = "question"
    COMPARISON = "comparison"
    ANNEXE = "annexe"
    COMPTE_RENDU = "compte_rendu"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Owning session (CASCADE on session deletion)
        parent_id: Parent document for tree nesting (None for roots)
        title: Document title
        slug: URL slug, unique within the session
        content: Markdown body
        type: One of DocumentType values
        doc_metadata: Free-form JSON metadata (column "metadata")
        sort_order: Position among siblings, contiguous from 0
        current_version: Latest version number, starts at 1

    Constraints:
        (session_id, slug): UNIQUE
    """

    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("session_id", "slug", name="uq_document_session_slug"),
    )

    session_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=True,
        default=None,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    slug: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DocumentType.GENERAL.value,
    )

    doc_metadata: Mapped[dict | None] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
        default=None,
    )

    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    current_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class DocumentVersionModel(Base, UUIDMixin, TimestampMixin):
    """
    Immutable snapshot of a document's content and metadata.

    Attributes:
        document_id: Versioned document (CASCADE on document deletion)
        version: Version number, strictly increasing per document
        content: Content snapshot
        doc_metadata: Metadata snapshot (column "metadata")
        author_id: Participant responsible for the change, if known
        change_description: Optional human-readable summary

    Constraints:
        (document_id, version): UNIQUE
    """

    __tablename__ = "document_versions"
    __table_args__ = (
        UniqueConstraint("document_id", "version", name="uq_document_version"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    doc_metadata: Mapped[dict | None] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
        default=None,
    )

    author_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("participants.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    change_description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
