"""
Annotation domain schemas.

Dependencies: pydantic
System role: Annotation API contracts
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class CreateAnnotationRequest(BaseModel):
    """Request schema for annotating a document."""

    document_id: uuid.UUID | None = None
    participant_id: uuid.UUID | None = None
    content: str | None = None
    type: str = Field("comment", description="comment, question, suggestion, objection or validation")
    anchor: dict[str, Any] | None = Field(None, description="Selection anchor in the document")


class UpdateAnnotationRequest(BaseModel):
    content: str | None = None
    status: str | None = Field(None, description="open, in_progress or resolved")


class ResolveAnnotationRequest(BaseModel):
    participant_id: uuid.UUID | None = None


class ReplyAnnotationRequest(BaseModel):
    participant_id: uuid.UUID | None = None
    content: str | None = None


class AnnotationAuthor(BaseModel):
    id: uuid.UUID
    pseudo: str
    color: str
    is_agent: bool


class AnnotationResponse(BaseModel):
    """Response schema for annotation operations."""

    id: uuid.UUID
    content: str
    type: str
    status: str
    anchor: dict[str, Any] | None
    author: AnnotationAuthor | None
    document_id: uuid.UUID
    parent_id: uuid.UUID | None
    mentions: list[str]
    taken_into_account: bool
    resolved_by: str | None
    created_at: datetime
    updated_at: datetime
    reply_count: int = 0


class AnnotationDetailResponse(AnnotationResponse):
    """Annotation with its direct replies."""

    replies: list[AnnotationResponse] = Field(default_factory=list)
