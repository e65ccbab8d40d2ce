"""
Decision domain schemas.

Request/response schemas for decision points, votes and arbitrations.

Dependencies: pydantic
System role: Decision API contracts
"""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator


class DecisionOptionInput(BaseModel):
    label: str = Field("", max_length=255, validation_alias=AliasChoices("label", "text"))
    description: str | None = None


class CreateDecisionRequest(BaseModel):
    """
    Request schema for opening a decision point.

    Options may be sent as plain strings or as {label, description} objects.
    """

    session_id: uuid.UUID | None = None
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    options: list[DecisionOptionInput] | None = Field(None, description="At least two options")
    document_id: uuid.UUID | None = Field(
        None,
        validation_alias=AliasChoices("linked_document_id", "document_id"),
        description="Optional linked document",
    )

    @field_validator("options", mode="before")
    @classmethod
    def normalize_options(cls, value):
        if isinstance(value, list):
            return [{"label": option} if isinstance(option, str) else option for option in value]
        return value


class VoteRequest(BaseModel):
    participant_id: uuid.UUID | None = None
    option_id: str | None = None
    comment: str | None = None


class UpdateDecisionStatusRequest(BaseModel):
    status: str | None = Field(None, description="ouvert, en_discussion, consensus, valide or reporte")


class ValidateDecisionRequest(BaseModel):
    selected_option_id: str | None = None


class DecisionOption(BaseModel):
    id: str
    label: str
    description: str | None = None


class DecisionResponse(BaseModel):
    """Response schema for decision operations."""

    id: uuid.UUID
    session_id: uuid.UUID
    title: str
    description: str | None
    status: str
    options: list[DecisionOption]
    selected_option_id: str | None
    is_locked: bool
    vote_stats: dict[str, int]
    vote_count: int
    linked_document_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class VoteDetail(BaseModel):
    id: uuid.UUID
    option_id: str
    comment: str | None
    participant_id: uuid.UUID


class VoteResponse(BaseModel):
    vote: VoteDetail | None
    stats: dict[str, int]


class LinkedDocument(BaseModel):
    id: uuid.UUID
    title: str
    slug: str


class ArbitrationResponse(BaseModel):
    """Summary of a validated decision."""

    id: uuid.UUID
    title: str
    description: str | None
    selected_option: DecisionOption | None
    document: LinkedDocument | None
    validated_at: datetime
    vote_count: int
