"""
Agent (MCP) endpoint schemas.

Dependencies: pydantic
System role: Agent API contracts
"""

import uuid

from pydantic import BaseModel, Field

from collabdoc.models.document import CreateDocumentRequest, UpdateDocumentRequest


class AgentCreateDocumentRequest(CreateDocumentRequest):
    """Document creation by an agent; the author comes from X-Agent-Id."""


class AgentUpdateDocumentRequest(UpdateDocumentRequest):
    """Document update by an agent; change_description labels the new version."""


class RespondToAnnotationRequest(BaseModel):
    content: str | None = None
    participant_id: uuid.UUID | None = Field(
        None, description="Fallback author when no X-Agent-Id header is sent"
    )


class AnnotationListResponse(BaseModel):
    annotations: list[dict]


class AgentDocumentListResponse(BaseModel):
    documents: list[dict]
