"""
Annotation ORM model.

Threaded remarks attached to a document. Replies reference their parent
through parent_annotation_id and always share the parent's document.

Dependencies: sqlalchemy, collabdoc.boundary.db.base
System role: Annotation persistence
"""

import enum
import uuid

from sqlalchemy import Boolean, ForeignKey, JSON, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from collabdoc.boundary.db.base import Base, UUIDMixin, TimestampMixin


class AnnotationType(str, enum.Enum):
    COMMENT = "comment"
    QUESTION = "question"
    SUGGESTION = "suggestion"
    OBJECTION = "objection"
    VALIDATION = "validation"


class AnnotationStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class AnnotationModel(Base, UUIDMixin, TimestampMixin):
    """
    Annotation ORM model.

    Attributes:
        document_id: Annotated document (CASCADE on document deletion)
        author_id: Authoring participant
        parent_annotation_id: Parent annotation for replies (None for roots)
        resolved_by_id: Participant who resolved the annotation
        content: Text of the remark
        type: One of AnnotationType values
        status: One of AnnotationStatus values
        anchor: Optional JSON selection anchor inside the document
        mentions: List of mentioned participant ids (as strings)
        taken_into_account: Set when an agent acknowledged the remark
    """

    __tablename__ = "annotations"

    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("participants.id", ondelete="CASCADE"),
        nullable=False,
    )

    parent_annotation_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("annotations.id", ondelete="CASCADE"),
        nullable=True,
        default=None,
        index=True,
    )

    resolved_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("participants.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AnnotationType.COMMENT.value,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AnnotationStatus.OPEN.value,
    )

    anchor: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)

    mentions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    taken_into_account: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
