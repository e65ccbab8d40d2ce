"""
Session domain schemas.

Request/response schemas for sessions, joins and presence.

Dependencies: pydantic
System role: Session API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    """Request schema for creating a session."""

    title: str | None = Field(None, max_length=255, description="Session title (required)")
    description: str | None = Field(None, description="Optional description")


class AgentCreateSessionRequest(CreateSessionRequest):
    """Create a session and join it as an AI agent in one call."""

    agent_name: str | None = Field(None, max_length=100, description="Agent pseudo")


class JoinSessionRequest(BaseModel):
    pseudo: str | None = Field(None, max_length=100, description="Display name (required)")
    is_agent: bool = False


class UpdateSessionStatusRequest(BaseModel):
    status: str | None = Field(None, description="preparation, en_cours, termine or archive")


class HeartbeatRequest(BaseModel):
    """Presence heartbeat sent periodically by clients."""

    participant_id: uuid.UUID | None = None
    current_document_id: uuid.UUID | None = None


class SessionResponse(BaseModel):
    """Response schema for session operations."""

    id: uuid.UUID
    title: str
    description: str | None
    status: str
    invite_code: str
    created_at: datetime
    updated_at: datetime


class SessionDetailResponse(SessionResponse):
    """Session with entity counts."""

    document_count: int
    participant_count: int
    decision_count: int


class SessionListResponse(BaseModel):
    sessions: list[SessionDetailResponse]


class ParticipantResponse(BaseModel):
    id: uuid.UUID
    pseudo: str
    color: str
    is_agent: bool
    current_document_id: uuid.UUID | None = None


class ParticipantListResponse(BaseModel):
    participants: list[ParticipantResponse]


class JoinSessionResponse(BaseModel):
    session: SessionResponse
    participant: ParticipantResponse


class AgentIdentity(BaseModel):
    participant_id: uuid.UUID
    pseudo: str
    color: str


class AgentCreateSessionResponse(BaseModel):
    """Session created for an agent, with the agent's identity and entry points."""

    session: SessionResponse
    agent: AgentIdentity
    endpoints: dict[str, str]
    invite_url: str
