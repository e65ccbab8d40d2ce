"""
Decision API endpoints.

Routes:
- POST /decisions - Open a decision point
- GET /decisions/session/{id} - List decisions of a session
- GET /decisions/session/{id}/arbitrations - Validated decisions summary
- GET /decisions/{id} - Get decision with vote stats
- DELETE /decisions/{id} - Delete decision and its votes
- POST /decisions/{id}/vote - Cast or replace a vote
- DELETE /decisions/{id}/vote - Withdraw a vote
- PATCH /decisions/{id}/status - Change status
- POST /decisions/{id}/validate - Select an option and lock
- POST /decisions/{id}/postpone - Postpone and unlock

Dependencies: collabdoc.application.services, collabdoc.models
System role: Decision and voting HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from collabdoc.api.deps import get_decision_service
from collabdoc.application.services import DecisionService
from collabdoc.models.common import SuccessResponse
from collabdoc.models.decision import (
    ArbitrationResponse,
    CreateDecisionRequest,
    DecisionResponse,
    UpdateDecisionStatusRequest,
    ValidateDecisionRequest,
    VoteRequest,
    VoteResponse,
)

from ..router_utils import handle_api_errors, parse_optional_uuid, parse_uuid, require
from .decision_responses import map_vote_to_response
from .decision_validators import (
    validate_decision_creation,
    validate_selection,
    validate_status_update,
    validate_vote,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/decisions", tags=["decisions"])


@router.post("", response_model=DecisionResponse, status_code=201)
@handle_api_errors
async def create_decision(
    request: CreateDecisionRequest,
    decision_service: DecisionService = Depends(get_decision_service),
) -> dict:
    """
    Open a decision with at least two options.

    An unknown linked document is ignored rather than rejected.

    Raises:
        HTTPException(400): Missing session_id or title, fewer than two options
        HTTPException(404): Session not found
    """
    validate_decision_creation(request)

    session = await decision_service.get_session_or_raise(request.session_id)
    linked_document = None
    if request.document_id:
        linked_document = await decision_service.find_document(request.document_id)

    decision = await decision_service.create(
        session,
        request.title.strip(),
        [option.model_dump() for option in request.options],
        request.description,
        linked_document,
    )
    return await decision_service.serialize(decision)


@router.get("/session/{session_id}", response_model=list[DecisionResponse])
@handle_api_errors
async def list_decisions(
    session_id: str,
    document_id: str | None = None,
    status: str | None = None,
    decision_service: DecisionService = Depends(get_decision_service),
) -> list[dict]:
    """
    List decisions of a session, newest first.

    Args:
        session_id: Session UUID
        document_id: Optional linked document filter
        status: Optional status filter
    """
    session = await decision_service.get_session_or_raise(parse_uuid(session_id))
    decisions = await decision_service.list_for_session(
        session.id, parse_optional_uuid(document_id), status
    )
    return await decision_service.serialize_many(decisions)


@router.get("/session/{session_id}/arbitrations", response_model=list[ArbitrationResponse])
@handle_api_errors
async def list_arbitrations(
    session_id: str,
    decision_service: DecisionService = Depends(get_decision_service),
) -> list[dict]:
    """Validated decisions, most recently validated first."""
    session = await decision_service.get_session_or_raise(parse_uuid(session_id))
    return await decision_service.get_arbitrations(session.id)


@router.get("/{decision_id}", response_model=DecisionResponse)
@handle_api_errors
async def get_decision(
    decision_id: str,
    decision_service: DecisionService = Depends(get_decision_service),
) -> dict:
    decision = await decision_service.get_decision_or_raise(parse_uuid(decision_id))
    return await decision_service.serialize(decision)


@router.delete("/{decision_id}", response_model=SuccessResponse)
@handle_api_errors
async def delete_decision(
    decision_id: str,
    decision_service: DecisionService = Depends(get_decision_service),
) -> dict:
    decision = await decision_service.get_decision_or_raise(parse_uuid(decision_id))
    await decision_service.delete(decision)
    return {"success": True}


@router.post("/{decision_id}/vote", response_model=VoteResponse)
@handle_api_errors
async def vote(
    decision_id: str,
    request: VoteRequest,
    decision_service: DecisionService = Depends(get_decision_service),
) -> dict:
    """
    Cast a vote, replacing the participant's previous one.

    Raises:
        HTTPException(400): Missing field or unknown option
        HTTPException(404): Decision or participant not found
        HTTPException(409): Decision locked, or concurrent vote
    """
    decision = await decision_service.get_decision_or_raise(parse_uuid(decision_id))
    validate_vote(request)
    participant = await decision_service.get_participant_or_raise(request.participant_id)

    recorded = await decision_service.vote(decision, participant, request.option_id, request.comment)
    return map_vote_to_response(recorded, await decision_service.get_vote_stats(decision))


@router.delete("/{decision_id}/vote", response_model=VoteResponse)
@handle_api_errors
async def remove_vote(
    decision_id: str,
    participant_id: str | None = None,
    decision_service: DecisionService = Depends(get_decision_service),
) -> dict:
    """
    Withdraw the participant's vote (participant_id query parameter).

    Raises:
        HTTPException(409): Decision locked
    """
    decision = await decision_service.get_decision_or_raise(parse_uuid(decision_id))
    participant_uuid = parse_uuid(
        require(participant_id, "participant_id est requis", "participant_id")
    )
    participant = await decision_service.get_participant_or_raise(participant_uuid)

    await decision_service.remove_vote(decision, participant)
    return map_vote_to_response(None, await decision_service.get_vote_stats(decision))


@router.patch("/{decision_id}/status", response_model=DecisionResponse)
@handle_api_errors
async def update_decision_status(
    decision_id: str,
    request: UpdateDecisionStatusRequest,
    decision_service: DecisionService = Depends(get_decision_service),
) -> dict:
    """
    Change the status; a locked decision only accepts reporte.

    Raises:
        HTTPException(400): Unknown status
        HTTPException(409): Decision locked
    """
    decision = await decision_service.get_decision_or_raise(parse_uuid(decision_id))
    validate_status_update(request)
    decision = await decision_service.update_status(decision, request.status)
    return await decision_service.serialize(decision)


@router.post("/{decision_id}/validate", response_model=DecisionResponse)
@handle_api_errors
async def validate_decision(
    decision_id: str,
    request: ValidateDecisionRequest,
    decision_service: DecisionService = Depends(get_decision_service),
) -> dict:
    """
    Select the winning option, set status valide and lock the decision.

    Raises:
        HTTPException(400): Missing or unknown option
        HTTPException(409): Already locked
    """
    decision = await decision_service.get_decision_or_raise(parse_uuid(decision_id))
    validate_selection(request)
    decision = await decision_service.validate(decision, request.selected_option_id)
    return await decision_service.serialize(decision)


@router.post("/{decision_id}/postpone", response_model=DecisionResponse)
@handle_api_errors
async def postpone_decision(
    decision_id: str,
    decision_service: DecisionService = Depends(get_decision_service),
) -> dict:
    """Set status reporte and unlock, allowing votes again."""
    decision = await decision_service.get_decision_or_raise(parse_uuid(decision_id))
    decision = await decision_service.postpone(decision)
    return await decision_service.serialize(decision)
