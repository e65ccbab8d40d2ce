"""
Document API endpoints.

Routes:
- GET /sessions/{id}/documents - One level of the tree (roots by default)
- POST /sessions/{id}/documents - Create document
- GET /sessions/{id}/documents/tree - Whole nested tree
- GET /documents/{id} - Get document with content (refreshes reader presence)
- PUT|PATCH /documents/{id} - Update document (versions content changes)
- DELETE /documents/{id} - Delete document and its subtree
- POST /documents/{id}/reorder - Move among siblings
- GET /documents/{id}/versions - Version history

Dependencies: collabdoc.application.services, collabdoc.models
System role: Document tree HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query

from collabdoc.api.deps import get_document_service, get_session_service
from collabdoc.application.services import DocumentService, SessionService
from collabdoc.models.document import (
    CreateDocumentRequest,
    DocumentDeletedResponse,
    DocumentDetailResponse,
    DocumentListResponse,
    DocumentTreeResponse,
    DocumentVersionListResponse,
    ReorderDocumentRequest,
    UpdateDocumentRequest,
)

from .router_utils import handle_api_errors, parse_optional_uuid, parse_uuid

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


@router.get("/sessions/{session_id}/documents", response_model=DocumentListResponse)
@handle_api_errors
async def list_documents(
    session_id: str,
    parent_id: str | None = None,
    doc_type: str | None = Query(None, alias="type"),
    document_service: DocumentService = Depends(get_document_service),
) -> dict:
    """
    List documents of one tree level, ordered by sort_order.

    Args:
        session_id: Session UUID
        parent_id: Parent document UUID (root documents when omitted)
        type: Optional document type filter
    """
    session = await document_service.get_session_or_raise(parse_uuid(session_id))
    documents = await document_service.list_documents(
        session.id, parse_optional_uuid(parent_id), doc_type
    )
    return {"documents": [DocumentService.serialize(d, include_content=False) for d in documents]}


@router.get("/sessions/{session_id}/documents/tree", response_model=DocumentTreeResponse)
@handle_api_errors
async def get_document_tree(
    session_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> dict:
    session = await document_service.get_session_or_raise(parse_uuid(session_id))
    return {"documents": await document_service.get_tree(session.id)}


@router.post(
    "/sessions/{session_id}/documents",
    response_model=DocumentDetailResponse,
    status_code=201,
)
@handle_api_errors
async def create_document(
    session_id: str,
    request: CreateDocumentRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> dict:
    """
    Create a document at the end of its sibling list, with version 1.

    Raises:
        HTTPException(400): Missing title or unknown type
        HTTPException(404): Session or author not found
    """
    session = await document_service.get_session_or_raise(parse_uuid(session_id))
    author = None
    if request.participant_id:
        author = await document_service.get_participant_or_raise(request.participant_id)

    document = await document_service.create(
        session,
        request.model_dump(exclude={"participant_id"}),
        author,
    )
    return DocumentService.serialize(document)


@router.get("/documents/{document_id}", response_model=DocumentDetailResponse)
@handle_api_errors
async def get_document(
    document_id: str,
    participant_id: str | None = None,
    document_service: DocumentService = Depends(get_document_service),
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """
    Get a document with its content.

    When participant_id is given, the reader's presence is refreshed with
    this document as current document.

    Raises:
        HTTPException(404): Document or participant not found
    """
    document = await document_service.get_document_or_raise(parse_uuid(document_id))
    reader_id = parse_optional_uuid(participant_id)
    if reader_id is not None:
        reader = await session_service.get_participant_or_raise(reader_id)
        if reader.session_id == document.session_id:
            await session_service.update_participant_presence(reader, document.id)
    return DocumentService.serialize(document)


@router.api_route(
    "/documents/{document_id}",
    methods=["PUT", "PATCH"],
    response_model=DocumentDetailResponse,
)
@handle_api_errors
async def update_document(
    document_id: str,
    request: UpdateDocumentRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> dict:
    """
    Update provided fields; a new version is recorded only when content or
    metadata actually changes.
    """
    document = await document_service.get_document_or_raise(parse_uuid(document_id))
    author = None
    if request.participant_id:
        author = await document_service.get_participant_or_raise(request.participant_id)

    document = await document_service.update(
        document,
        request.model_dump(exclude={"participant_id", "change_description"}),
        author,
        request.change_description,
    )
    return DocumentService.serialize(document)


@router.delete("/documents/{document_id}", response_model=DocumentDeletedResponse)
@handle_api_errors
async def delete_document(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> dict:
    """Delete a document with all descendants, annotations and versions."""
    document = await document_service.get_document_or_raise(parse_uuid(document_id))
    deleted = await document_service.delete(document)
    return {"success": True, "deleted_ids": deleted}


@router.post("/documents/{document_id}/reorder", response_model=DocumentDetailResponse)
@handle_api_errors
async def reorder_document(
    document_id: str,
    request: ReorderDocumentRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> dict:
    document = await document_service.get_document_or_raise(parse_uuid(document_id))
    document = await document_service.reorder(document, request.position)
    return DocumentService.serialize(document)


@router.get("/documents/{document_id}/versions", response_model=DocumentVersionListResponse)
@handle_api_errors
async def list_versions(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> dict:
    """Version history, newest first."""
    document = await document_service.get_document_or_raise(parse_uuid(document_id))
    versions = await document_service.get_versions(document)
    return {"versions": await document_service.serialize_versions(versions)}
