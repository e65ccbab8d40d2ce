"""
Session service orchestrator.

Coordinates session lifecycle (create, status changes, invite codes),
participant joins and heartbeat-based presence.

Dependencies: collabdoc.boundary.db.CRUD, collabdoc.boundary.notifications
System role: Session and presence use case orchestration
"""

import logging
import random
from datetime import timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from collabdoc.application.services.base_service import BaseService, id_or_none, to_iso
from collabdoc.boundary.db.base import utcnow
from collabdoc.boundary.db.CRUD import (
    decision_crud,
    document_crud,
    participant_crud,
    session_crud,
)
from collabdoc.boundary.db.models import ParticipantModel, SessionModel, SessionStatus
from collabdoc.boundary.db.models.participant_model import (
    ONLINE_WINDOW_SECONDS,
    PARTICIPANT_COLORS,
)
from collabdoc.boundary.db.models.session_model import generate_invite_code
from collabdoc.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

SESSION_STATUSES = tuple(s.value for s in SessionStatus)
INVITE_CODE_ATTEMPTS = 5


class SessionService(BaseService):
    """Session service orchestrator."""

    async def _new_invite_code(self) -> str:
        """Draw invite codes until one is not already taken."""
        for _ in range(INVITE_CODE_ATTEMPTS):
            code = generate_invite_code()
            if not await session_crud.invite_code_exists(self.db, code):
                return code
        raise RuntimeError("Could not allocate a unique invite code")

    async def create_session(self, title: str, description: str | None = None) -> SessionModel:
        """
        Create new session with a fresh invite code.

        Args:
            title: Session title
            description: Optional description

        Returns:
            SessionModel: Created session (status preparation)
        """
        session = await session_crud.create(
            self.db,
            title=title,
            description=description,
            status=SessionStatus.PREPARATION.value,
            invite_code=await self._new_invite_code(),
        )
        await self.db.commit()

        logger.info(
            "Session created",
            extra={"session_id": str(session.id), "title": title},
        )
        return session

    async def get_all_sessions(self, limit: int = 50) -> Sequence[SessionModel]:
        """Most recent sessions, newest first."""
        return await session_crud.get_recent(self.db, limit=limit)

    async def get_session_stats(self, session_id: UUID) -> dict:
        """
        Count the entities owned by a session.

        Returns:
            dict: document_count, participant_count, decision_count
        """
        return {
            "document_count": await document_crud.count_by_session(self.db, session_id),
            "participant_count": await participant_crud.count_by_session(self.db, session_id),
            "decision_count": await decision_crud.count_by_session(self.db, session_id),
        }

    async def find_by_invite_code(self, invite_code: str) -> SessionModel | None:
        return await session_crud.get_by_invite_code(self.db, invite_code)

    async def join_session(
        self,
        session: SessionModel,
        pseudo: str,
        is_agent: bool = False,
    ) -> ParticipantModel:
        """
        Find or create the participant named pseudo in the session.

        A returning participant only has its last_seen_at refreshed. A new
        participant gets a random colour and triggers a presence broadcast.
        Archived sessions are rejected by the HTTP layer, not here.

        Args:
            session: Target session
            pseudo: Display name, unique per session
            is_agent: True for AI agents

        Returns:
            ParticipantModel: The existing or newly created participant
        """
        existing = await participant_crud.get_by_session_and_pseudo(self.db, session.id, pseudo)
        if existing is not None:
            existing.last_seen_at = utcnow()
            await self.db.commit()
            logger.info(
                "Participant rejoined session",
                extra={"session_id": str(session.id), "participant_id": str(existing.id)},
            )
            return existing

        try:
            participant = await participant_crud.create(
                self.db,
                session_id=session.id,
                pseudo=pseudo,
                color=random.choice(PARTICIPANT_COLORS),
                is_agent=is_agent,
                last_seen_at=utcnow(),
            )
            await self.db.commit()
        except IntegrityError:
            # Concurrent join with the same pseudo won the insert
            session_id = session.id
            await self.db.rollback()
            await self.db.refresh(session)
            participant = await participant_crud.get_by_session_and_pseudo(self.db, session_id, pseudo)
            if participant is None:
                raise
            return participant

        logger.info(
            "Participant joined session",
            extra={
                "session_id": str(session.id),
                "participant_id": str(participant.id),
                "pseudo": pseudo,
                "is_agent": is_agent,
            },
        )
        await self.broadcast_presence(session.id)
        return participant

    async def update_status(self, session: SessionModel, status: str) -> SessionModel:
        """
        Set the session status unconditionally and notify subscribers.

        Raises:
            ValidationError: If status is not a known session status
        """
        if status not in SESSION_STATUSES:
            raise ValidationError("Statut invalide", field="status")

        previous = session.status
        session.status = status
        await self.db.commit()

        logger.info(
            "Session status changed",
            extra={"session_id": str(session.id), "from": previous, "to": status},
        )
        await self.publisher.publish_session_status_changed(session.id, status)
        return session

    async def archive(self, session: SessionModel) -> SessionModel:
        return await self.update_status(session, SessionStatus.ARCHIVE.value)

    async def regenerate_invite_code(self, session: SessionModel) -> SessionModel:
        """Replace the invite code; the previous one stops working."""
        session.invite_code = await self._new_invite_code()
        await self.db.commit()
        logger.info("Invite code regenerated", extra={"session_id": str(session.id)})
        return session

    async def update_participant_presence(
        self,
        participant: ParticipantModel,
        current_document_id: UUID | None = None,
    ) -> ParticipantModel:
        """
        Refresh last_seen_at (and current document when given), then
        re-broadcast the session's online list.
        """
        participant.last_seen_at = utcnow()
        if current_document_id is not None:
            participant.current_document_id = current_document_id
        await self.db.commit()
        await self.broadcast_presence(participant.session_id)
        return participant

    async def get_online_participants(self, session_id: UUID) -> Sequence[ParticipantModel]:
        """Participants seen within the presence window."""
        threshold = utcnow() - timedelta(seconds=ONLINE_WINDOW_SECONDS)
        return await participant_crud.get_online(self.db, session_id, threshold)

    async def broadcast_presence(self, session_id: UUID) -> None:
        """Publish the full online participant list (not a delta)."""
        participants = await self.get_online_participants(session_id)
        await self.publisher.publish_presence_update(
            session_id,
            [self.serialize_participant(p) for p in participants],
        )

    @staticmethod
    def serialize_session(session: SessionModel, stats: dict | None = None) -> dict:
        data = {
            "id": str(session.id),
            "title": session.title,
            "description": session.description,
            "status": session.status,
            "invite_code": session.invite_code,
            "created_at": to_iso(session.created_at),
            "updated_at": to_iso(session.updated_at),
        }
        if stats is not None:
            data.update(stats)
        return data

    @staticmethod
    def serialize_participant(participant: ParticipantModel) -> dict:
        return {
            "id": str(participant.id),
            "pseudo": participant.pseudo,
            "color": participant.color,
            "is_agent": participant.is_agent,
            "current_document_id": id_or_none(participant.current_document_id),
        }
