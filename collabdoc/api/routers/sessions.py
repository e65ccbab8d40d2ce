"""
Session API endpoints.

Routes:
- POST /sessions - Create session
- POST /sessions/agent/create - Create session and join it as an AI agent
- GET /sessions - List recent sessions with counts
- GET /sessions/{id} - Get single session with counts
- POST /sessions/join/{invite_code} - Join a session by invite code
- GET /sessions/{id}/participants - Online participants
- PATCH /sessions/{id}/status - Change session status
- POST /sessions/{id}/heartbeat - Presence heartbeat
- POST /sessions/{id}/invite-code - Regenerate invite code

Dependencies: collabdoc.application.services, collabdoc.models
System role: Session and presence HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from collabdoc.api.deps import get_session_service, get_settings_dependency
from collabdoc.application.services import SessionService
from collabdoc.configs import Settings
from collabdoc.core.exceptions import (
    InvalidInviteCodeError,
    ParticipantNotFoundError,
    SessionArchivedError,
)
from collabdoc.models.common import StatusResponse
from collabdoc.models.session import (
    AgentCreateSessionRequest,
    AgentCreateSessionResponse,
    CreateSessionRequest,
    HeartbeatRequest,
    JoinSessionRequest,
    JoinSessionResponse,
    ParticipantListResponse,
    SessionDetailResponse,
    SessionListResponse,
    SessionResponse,
    UpdateSessionStatusRequest,
)

from .router_utils import handle_api_errors, parse_uuid, require

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

INVALID_SESSION_ID = "ID de session invalide"


@router.post("", response_model=SessionResponse, status_code=201)
@handle_api_errors
async def create_session(
    request: CreateSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """
    Create a new session in preparation status.

    Raises:
        HTTPException(400): Missing title
    """
    title = require(request.title, "Le titre est requis", "title")
    session = await session_service.create_session(title.strip(), request.description)
    return SessionService.serialize_session(session)


@router.post("/agent/create", response_model=AgentCreateSessionResponse, status_code=201)
@handle_api_errors
async def agent_create_session(
    request: AgentCreateSessionRequest,
    session_service: SessionService = Depends(get_session_service),
    settings: Settings = Depends(get_settings_dependency),
) -> dict:
    """
    Create a session and immediately join it as an AI agent.

    Returns the agent's participant id and the endpoints it should call next.
    """
    title = require(request.title, "Le titre est requis", "title")
    agent_name = (request.agent_name or "").strip() or settings.agent.agent_name

    session = await session_service.create_session(title.strip(), request.description)
    participant = await session_service.join_session(session, agent_name, is_agent=True)

    session_id = str(session.id)
    logger.info(
        "Agent session created",
        extra={"session_id": session_id, "participant_id": str(participant.id)},
    )
    return {
        "session": SessionService.serialize_session(session),
        "agent": {
            "participant_id": participant.id,
            "pseudo": participant.pseudo,
            "color": participant.color,
        },
        "endpoints": {
            "documents": f"/api/v1/mcp/sessions/{session_id}/documents",
            "status": f"/api/v1/mcp/sessions/{session_id}/status",
            "heartbeat": f"/api/v1/sessions/{session_id}/heartbeat",
        },
        "invite_url": f"{settings.api.public_base_url}/session/join?code={session.invite_code}",
    }


@router.get("", response_model=SessionListResponse)
@handle_api_errors
async def list_sessions(
    limit: int = 50,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """List the most recent sessions (newest first) with entity counts."""
    sessions = await session_service.get_all_sessions(limit=limit)
    return {
        "sessions": [
            SessionService.serialize_session(s, await session_service.get_session_stats(s.id))
            for s in sessions
        ]
    }


@router.get("/{session_id}", response_model=SessionDetailResponse)
@handle_api_errors
async def get_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """
    Get single session by ID.

    Raises:
        HTTPException(400): Malformed ID
        HTTPException(404): Session not found
    """
    session = await session_service.get_session_or_raise(parse_uuid(session_id, INVALID_SESSION_ID))
    stats = await session_service.get_session_stats(session.id)
    return SessionService.serialize_session(session, stats)


@router.post("/join/{invite_code}", response_model=JoinSessionResponse)
@handle_api_errors
async def join_session(
    invite_code: str,
    request: JoinSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """
    Join a session with a pseudo; rejoining with the same pseudo returns
    the existing participant.

    Raises:
        HTTPException(400): Missing pseudo
        HTTPException(404): Unknown invite code
        HTTPException(410): Session archived
    """
    pseudo = require(request.pseudo, "Le pseudo est requis", "pseudo").strip()

    session = await session_service.find_by_invite_code(invite_code)
    if session is None:
        raise InvalidInviteCodeError(invite_code)
    if session.is_archived:
        raise SessionArchivedError(session.id)

    participant = await session_service.join_session(session, pseudo, request.is_agent)
    return {
        "session": SessionService.serialize_session(session),
        "participant": SessionService.serialize_participant(participant),
    }


@router.get("/{session_id}/participants", response_model=ParticipantListResponse)
@handle_api_errors
async def list_online_participants(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """Participants seen within the presence window."""
    session = await session_service.get_session_or_raise(parse_uuid(session_id, INVALID_SESSION_ID))
    participants = await session_service.get_online_participants(session.id)
    return {"participants": [SessionService.serialize_participant(p) for p in participants]}


@router.patch("/{session_id}/status", response_model=SessionResponse)
@handle_api_errors
async def update_session_status(
    session_id: str,
    request: UpdateSessionStatusRequest,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """
    Change the session status (any status to any status).

    Raises:
        HTTPException(400): Missing or unknown status
    """
    session = await session_service.get_session_or_raise(parse_uuid(session_id, INVALID_SESSION_ID))
    status = require(request.status, "Statut invalide", "status")
    session = await session_service.update_status(session, status)
    return SessionService.serialize_session(session)


@router.post("/{session_id}/heartbeat", response_model=StatusResponse)
@handle_api_errors
async def heartbeat(
    session_id: str,
    request: HeartbeatRequest,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """
    Refresh a participant's presence and current document.

    Raises:
        HTTPException(400): Missing participant_id
        HTTPException(404): Session not found, or participant not in the session
    """
    participant_id = require(request.participant_id, "participant_id est requis", "participant_id")
    session = await session_service.get_session_or_raise(parse_uuid(session_id, INVALID_SESSION_ID))

    participant = await session_service.get_participant_or_raise(participant_id)
    if participant.session_id != session.id:
        raise ParticipantNotFoundError(participant_id)

    await session_service.update_participant_presence(participant, request.current_document_id)
    return {"status": "ok"}


@router.post("/{session_id}/invite-code", response_model=SessionResponse)
@handle_api_errors
async def regenerate_invite_code(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """Issue a new invite code; the previous code stops working."""
    session = await session_service.get_session_or_raise(parse_uuid(session_id, INVALID_SESSION_ID))
    session = await session_service.regenerate_invite_code(session)
    return SessionService.serialize_session(session)
