"""
Participant CRUD operations.

Dependencies: sqlalchemy, collabdoc.boundary.db.models
System role: Participant and presence persistence operations
"""

from datetime import datetime
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.boundary.db.models.participant_model import ParticipantModel
from collabdoc.boundary.db.CRUD.base_crud import BaseCRUD


class ParticipantCRUD(BaseCRUD[ParticipantModel]):
    """CRUD operations for ParticipantModel."""

    def __init__(self) -> None:
        """Initialize ParticipantCRUD with ParticipantModel."""
        super().__init__(ParticipantModel)

    async def get_by_session_and_pseudo(
        self,
        session: AsyncSession,
        session_id: UUID,
        pseudo: str,
    ) -> ParticipantModel | None:
        """
        Find a participant by its pseudo inside a session.

        Args:
            session: Async database session
            session_id: Session UUID
            pseudo: Exact pseudo (case-sensitive)

        Returns:
            ParticipantModel if found, None otherwise
        """
        stmt = select(ParticipantModel).where(
            ParticipantModel.session_id == session_id,
            ParticipantModel.pseudo == pseudo,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_session_and_pseudos(
        self,
        session: AsyncSession,
        session_id: UUID,
        pseudos: Iterable[str],
    ) -> Sequence[ParticipantModel]:
        """Participants of a session whose pseudo is in the given set."""
        names = list(set(pseudos))
        if not names:
            return []
        stmt = select(ParticipantModel).where(
            ParticipantModel.session_id == session_id,
            ParticipantModel.pseudo.in_(names),
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_online(
        self,
        session: AsyncSession,
        session_id: UUID,
        since: datetime,
    ) -> Sequence[ParticipantModel]:
        """
        Participants seen after a threshold.

        Args:
            session: Async database session
            session_id: Session UUID
            since: Presence threshold (now minus the online window)

        Returns:
            Online participants ordered by pseudo
        """
        stmt = (
            select(ParticipantModel)
            .where(
                ParticipantModel.session_id == session_id,
                ParticipantModel.last_seen_at > since,
            )
            .order_by(ParticipantModel.pseudo)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_session(self, session: AsyncSession, session_id: UUID) -> int:
        return await self._count(session, ParticipantModel.session_id == session_id)


participant_crud = ParticipantCRUD()
