"""
Decision and vote CRUD operations.

Dependencies: sqlalchemy, collabdoc.boundary.db.models
System role: Decision and vote persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.boundary.db.models.decision_model import DecisionModel, DecisionStatus, VoteModel
from collabdoc.boundary.db.CRUD.base_crud import BaseCRUD

FINAL_STATUSES = (DecisionStatus.VALIDE.value, DecisionStatus.REPORTE.value)


class DecisionCRUD(BaseCRUD[DecisionModel]):
    """CRUD operations for DecisionModel."""

    def __init__(self) -> None:
        """Initialize DecisionCRUD with DecisionModel."""
        super().__init__(DecisionModel)

    async def get_by_session(
        self,
        session: AsyncSession,
        session_id: UUID,
        document_id: UUID | None = None,
        status: str | None = None,
    ) -> Sequence[DecisionModel]:
        """
        Decisions of a session.

        Args:
            session: Async database session
            session_id: Session UUID
            document_id: Optional linked document filter
            status: Optional status filter

        Returns:
            Decisions, newest first
        """
        stmt = select(DecisionModel).where(DecisionModel.session_id == session_id)
        if document_id:
            stmt = stmt.where(DecisionModel.linked_document_id == document_id)
        if status:
            stmt = stmt.where(DecisionModel.status == status)
        stmt = stmt.order_by(DecisionModel.created_at.desc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_validated(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> Sequence[DecisionModel]:
        """Validated decisions, most recently updated first."""
        stmt = (
            select(DecisionModel)
            .where(
                DecisionModel.session_id == session_id,
                DecisionModel.status == DecisionStatus.VALIDE.value,
            )
            .order_by(DecisionModel.updated_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_pending_by_session(self, session: AsyncSession, session_id: UUID) -> int:
        """Decisions neither validated nor postponed."""
        return await self._count(
            session,
            DecisionModel.session_id == session_id,
            DecisionModel.status.not_in(FINAL_STATUSES),
        )

    async def count_by_session(self, session: AsyncSession, session_id: UUID) -> int:
        return await self._count(session, DecisionModel.session_id == session_id)

    async def unlink_document(self, session: AsyncSession, document_id: UUID) -> int:
        """
        Detach decisions from a document about to be deleted.

        Returns:
            int: Number of decisions unlinked
        """
        stmt = (
            update(DecisionModel)
            .where(DecisionModel.linked_document_id == document_id)
            .values(linked_document_id=None)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.rowcount


class VoteCRUD(BaseCRUD[VoteModel]):
    """CRUD operations for VoteModel."""

    def __init__(self) -> None:
        """Initialize VoteCRUD with VoteModel."""
        super().__init__(VoteModel)

    async def get_by_decision_and_participant(
        self,
        session: AsyncSession,
        decision_id: UUID,
        participant_id: UUID,
    ) -> VoteModel | None:
        """
        The vote a participant cast on a decision.

        Returns:
            VoteModel if the participant voted, None otherwise
        """
        stmt = select(VoteModel).where(
            VoteModel.decision_id == decision_id,
            VoteModel.participant_id == participant_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_decision(
        self,
        session: AsyncSession,
        decision_id: UUID,
    ) -> Sequence[VoteModel]:
        stmt = (
            select(VoteModel)
            .where(VoteModel.decision_id == decision_id)
            .order_by(VoteModel.created_at.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_decisions(
        self,
        session: AsyncSession,
        decision_ids: Sequence[UUID],
    ) -> dict[UUID, list[VoteModel]]:
        """Votes grouped by decision id for a batch of decisions."""
        grouped: dict[UUID, list[VoteModel]] = {decision_id: [] for decision_id in decision_ids}
        if not decision_ids:
            return grouped
        stmt = select(VoteModel).where(VoteModel.decision_id.in_(list(decision_ids)))
        result = await session.execute(stmt)
        for vote in result.scalars().all():
            grouped.setdefault(vote.decision_id, []).append(vote)
        return grouped

    async def delete_by_decision(self, session: AsyncSession, decision_id: UUID) -> int:
        result = await session.execute(delete(VoteModel).where(VoteModel.decision_id == decision_id))
        return result.rowcount


decision_crud = DecisionCRUD()
vote_crud = VoteCRUD()
