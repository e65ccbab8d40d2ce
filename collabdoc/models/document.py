"""
Document domain schemas.

Request/response schemas for the document tree and its versions.

Dependencies: pydantic
System role: Document API contracts
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class CreateDocumentRequest(BaseModel):
    """Request schema for creating a document."""

    title: str | None = Field(None, max_length=255, description="Document title (required)")
    content: str | None = Field(None, description="Markdown content")
    type: str | None = Field(None, description="Document type (default general)")
    metadata: dict[str, Any] | None = None
    parent_id: uuid.UUID | None = Field(None, description="Parent document; root when omitted")
    sort_order: int | None = Field(None, description="Explicit position; appended when omitted")
    participant_id: uuid.UUID | None = Field(None, description="Author of the initial version")


class UpdateDocumentRequest(BaseModel):
    """Partial update; omitted or null fields are left unchanged."""

    title: str | None = Field(None, max_length=255)
    content: str | None = None
    type: str | None = None
    metadata: dict[str, Any] | None = None
    sort_order: int | None = None
    participant_id: uuid.UUID | None = None
    change_description: str | None = Field(None, max_length=500)


class ReorderDocumentRequest(BaseModel):
    position: int = Field(..., description="New zero-based position among siblings")


class DocumentResponse(BaseModel):
    """Document without content, as listed in trees and listings."""

    id: uuid.UUID
    session_id: uuid.UUID
    title: str
    slug: str
    type: str
    parent_id: uuid.UUID | None
    sort_order: int
    current_version: int
    created_at: datetime
    updated_at: datetime


class DocumentDetailResponse(DocumentResponse):
    content: str
    metadata: dict[str, Any] | None = None


class DocumentTreeNode(DocumentResponse):
    children: list[DocumentTreeNode] = Field(default_factory=list)


class DocumentListResponse(BaseModel):
    documents: list[DocumentResponse]


class DocumentTreeResponse(BaseModel):
    documents: list[DocumentTreeNode]


class DocumentDeletedResponse(BaseModel):
    success: bool = True
    deleted_ids: list[uuid.UUID]


class DocumentVersionResponse(BaseModel):
    id: uuid.UUID
    version: int
    author: str | None
    change_description: str | None
    created_at: datetime


class DocumentVersionListResponse(BaseModel):
    versions: list[DocumentVersionResponse]
