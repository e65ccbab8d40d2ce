"""
Annotation API endpoints.

Routes:
- POST /annotations - Annotate a document
- GET /annotations/{id} - Get annotation with its direct replies
- PUT|PATCH /annotations/{id} - Update content and/or status
- POST /annotations/{id}/resolve - Resolve annotation
- POST /annotations/{id}/replies - Reply to annotation

Dependencies: collabdoc.application.services, collabdoc.models
System role: Annotation HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from collabdoc.api.deps import get_annotation_service
from collabdoc.application.services import AnnotationService
from collabdoc.models.annotation import (
    AnnotationDetailResponse,
    AnnotationResponse,
    CreateAnnotationRequest,
    ReplyAnnotationRequest,
    ResolveAnnotationRequest,
    UpdateAnnotationRequest,
)

from .router_utils import handle_api_errors, parse_uuid, require

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/annotations", tags=["annotations"])


@router.post("", response_model=AnnotationResponse, status_code=201)
@handle_api_errors
async def create_annotation(
    request: CreateAnnotationRequest,
    annotation_service: AnnotationService = Depends(get_annotation_service),
) -> dict:
    """
    Create a root annotation; @pseudo mentions are resolved to participant ids.

    Raises:
        HTTPException(400): Missing field or unknown type
        HTTPException(404): Document or participant not found
    """
    document_id = require(request.document_id, "document_id est requis", "document_id")
    participant_id = require(request.participant_id, "participant_id est requis", "participant_id")
    content = require(request.content, "Le contenu est requis", "content")

    document = await annotation_service.get_document_or_raise(document_id)
    author = await annotation_service.get_participant_or_raise(participant_id)

    annotation = await annotation_service.create(
        document, author, content, request.type, request.anchor
    )
    return await annotation_service.serialize(annotation)


@router.get("/{annotation_id}", response_model=AnnotationDetailResponse)
@handle_api_errors
async def get_annotation(
    annotation_id: str,
    annotation_service: AnnotationService = Depends(get_annotation_service),
) -> dict:
    annotation = await annotation_service.get_annotation_or_raise(parse_uuid(annotation_id))
    data = await annotation_service.serialize(annotation)
    replies = await annotation_service.get_replies(annotation)
    data["replies"] = await annotation_service.serialize_many(replies)
    return data


@router.api_route("/{annotation_id}", methods=["PUT", "PATCH"], response_model=AnnotationResponse)
@handle_api_errors
async def update_annotation(
    annotation_id: str,
    request: UpdateAnnotationRequest,
    annotation_service: AnnotationService = Depends(get_annotation_service),
) -> dict:
    """
    Update content and/or status; blank fields are ignored.

    Raises:
        HTTPException(400): Unknown status
    """
    annotation = await annotation_service.get_annotation_or_raise(parse_uuid(annotation_id))
    if request.content and request.content.strip():
        annotation = await annotation_service.update(annotation, request.content)
    if request.status:
        annotation = await annotation_service.set_status(annotation, request.status)
    return await annotation_service.serialize(annotation)


@router.post("/{annotation_id}/resolve", response_model=AnnotationResponse)
@handle_api_errors
async def resolve_annotation(
    annotation_id: str,
    request: ResolveAnnotationRequest,
    annotation_service: AnnotationService = Depends(get_annotation_service),
) -> dict:
    annotation = await annotation_service.get_annotation_or_raise(parse_uuid(annotation_id))
    participant_id = require(request.participant_id, "participant_id est requis", "participant_id")
    participant = await annotation_service.get_participant_or_raise(participant_id)
    annotation = await annotation_service.resolve(annotation, participant)
    return await annotation_service.serialize(annotation)


@router.post("/{annotation_id}/replies", response_model=AnnotationResponse, status_code=201)
@handle_api_errors
async def reply_to_annotation(
    annotation_id: str,
    request: ReplyAnnotationRequest,
    annotation_service: AnnotationService = Depends(get_annotation_service),
) -> dict:
    """Reply to an annotation; the reply is a comment on the same document."""
    annotation = await annotation_service.get_annotation_or_raise(parse_uuid(annotation_id))
    participant_id = require(request.participant_id, "participant_id est requis", "participant_id")
    content = require(request.content, "Le contenu est requis", "content")
    author = await annotation_service.get_participant_or_raise(participant_id)
    reply = await annotation_service.create_reply(annotation, content, author)
    return await annotation_service.serialize(reply)
