"""
Agent (MCP) API endpoints.

Coarse-grained routes called by the agent tool adapter. The calling agent
identifies itself with the X-Agent-Id header (its participant id); writes
are attributed to that participant.

Routes:
- GET /mcp/sessions/{id}/documents - List documents
- POST /mcp/sessions/{id}/documents - Create document
- GET /mcp/documents/{id} - Read document (optional annotations/versions)
- PUT|PATCH /mcp/documents/{id} - Update document
- DELETE /mcp/documents/{id} - Delete document
- GET /mcp/documents/{id}/annotations - Annotations of a document
- GET /mcp/sessions/{id}/annotations - Annotations of a session
- GET /mcp/sessions/{id}/status - Session dashboard
- POST /mcp/annotations/{id}/respond - Reply as the agent
- POST /mcp/annotations/{id}/acknowledge - Mark as taken into account

Dependencies: collabdoc.application.services, collabdoc.models
System role: Agent tool HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Query, Response, status

from collabdoc.api.deps import get_agent_service
from collabdoc.application.services import AgentService
from collabdoc.boundary.db.CRUD import AnnotationFilters
from collabdoc.models.agent import (
    AgentCreateDocumentRequest,
    AgentDocumentListResponse,
    AgentUpdateDocumentRequest,
    AnnotationListResponse,
    RespondToAnnotationRequest,
)

from .router_utils import handle_api_errors, parse_optional_uuid, parse_uuid, require

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mcp", tags=["agent"])


def get_agent_id(x_agent_id: str | None = Header(None, alias="X-Agent-Id")) -> UUID | None:
    """Participant id of the calling agent, when sent."""
    return parse_optional_uuid(x_agent_id, "X-Agent-Id invalide")


def _annotation_filters(
    annotation_type: str | None,
    status_filter: str | None,
    untreated_only: bool,
    author_id: str | None = None,
) -> AnnotationFilters:
    return AnnotationFilters(
        type=annotation_type or None,
        status=status_filter or None,
        untreated_only=untreated_only,
        author_id=parse_optional_uuid(author_id),
    )


@router.get("/sessions/{session_id}/documents", response_model=AgentDocumentListResponse)
@handle_api_errors
async def list_documents(
    session_id: str,
    parent_id: str | None = None,
    doc_type: str | None = Query(None, alias="type"),
    agent_service: AgentService = Depends(get_agent_service),
) -> dict:
    documents = await agent_service.list_documents(
        parse_uuid(session_id), parse_optional_uuid(parent_id), doc_type
    )
    return {"documents": documents}


@router.get("/documents/{document_id}")
@handle_api_errors
async def read_document(
    document_id: str,
    include_annotations: bool = False,
    include_versions: bool = False,
    agent_service: AgentService = Depends(get_agent_service),
) -> dict:
    return await agent_service.read_document(
        parse_uuid(document_id), include_annotations, include_versions
    )


@router.post("/sessions/{session_id}/documents", status_code=201)
@handle_api_errors
async def create_document(
    session_id: str,
    request: AgentCreateDocumentRequest,
    agent_id: UUID | None = Depends(get_agent_id),
    agent_service: AgentService = Depends(get_agent_service),
) -> dict:
    """
    Create a document authored by the calling agent.

    Raises:
        HTTPException(400): Missing title
    """
    require(request.title, "Le titre est requis", "title")
    return await agent_service.create_document(
        parse_uuid(session_id),
        request.model_dump(exclude={"participant_id"}),
        agent_id or request.participant_id,
    )


@router.api_route("/documents/{document_id}", methods=["PUT", "PATCH"])
@handle_api_errors
async def update_document(
    document_id: str,
    request: AgentUpdateDocumentRequest,
    agent_id: UUID | None = Depends(get_agent_id),
    agent_service: AgentService = Depends(get_agent_service),
) -> dict:
    """Update a document; agent edits without a description get a default one."""
    return await agent_service.update_document(
        parse_uuid(document_id),
        request.model_dump(exclude={"participant_id"}),
        agent_id or request.participant_id,
    )


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_api_errors
async def delete_document(
    document_id: str,
    agent_id: UUID | None = Depends(get_agent_id),
    agent_service: AgentService = Depends(get_agent_service),
) -> Response:
    await agent_service.delete_document(parse_uuid(document_id), agent_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/documents/{document_id}/annotations", response_model=AnnotationListResponse)
@handle_api_errors
async def read_annotations(
    document_id: str,
    annotation_type: str | None = Query(None, alias="type"),
    status_filter: str | None = Query(None, alias="status"),
    untreated_only: bool = False,
    author_id: str | None = None,
    agent_service: AgentService = Depends(get_agent_service),
) -> dict:
    """Root annotations of a document, newest first, with optional filters."""
    filters = _annotation_filters(annotation_type, status_filter, untreated_only, author_id)
    return {"annotations": await agent_service.read_annotations(parse_uuid(document_id), filters)}


@router.get("/sessions/{session_id}/annotations", response_model=AnnotationListResponse)
@handle_api_errors
async def session_annotations(
    session_id: str,
    annotation_type: str | None = Query(None, alias="type"),
    status_filter: str | None = Query(None, alias="status"),
    untreated_only: bool = False,
    agent_service: AgentService = Depends(get_agent_service),
) -> dict:
    filters = _annotation_filters(annotation_type, status_filter, untreated_only)
    return {
        "annotations": await agent_service.get_session_annotations(parse_uuid(session_id), filters)
    }


@router.get("/sessions/{session_id}/status")
@handle_api_errors
async def get_session_status(
    session_id: str,
    agent_service: AgentService = Depends(get_agent_service),
) -> dict:
    """Statistics, decisions and priority annotations of a session."""
    return await agent_service.get_session_status(parse_uuid(session_id))


@router.post("/annotations/{annotation_id}/respond", status_code=201)
@handle_api_errors
async def respond_to_annotation(
    annotation_id: str,
    request: RespondToAnnotationRequest,
    agent_id: UUID | None = Depends(get_agent_id),
    agent_service: AgentService = Depends(get_agent_service),
) -> dict:
    """
    Reply to an annotation as the calling agent.

    Raises:
        HTTPException(400): Missing content or no identifiable author
    """
    content = require(request.content, "Le contenu est requis", "content")
    return await agent_service.respond_to_annotation(
        parse_uuid(annotation_id), content, agent_id or request.participant_id
    )


@router.post("/annotations/{annotation_id}/acknowledge")
@handle_api_errors
async def acknowledge_annotation(
    annotation_id: str,
    agent_service: AgentService = Depends(get_agent_service),
) -> dict:
    return await agent_service.acknowledge_annotation(parse_uuid(annotation_id))
