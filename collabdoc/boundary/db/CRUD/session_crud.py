"""
Session CRUD operations.

Provides Create, Read, Update, Delete operations for SessionModel
with invite-code lookup and newest-first listing.

Dependencies: sqlalchemy, collabdoc.boundary.db.models
System role: Session persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.boundary.db.models.session_model import SessionModel
from collabdoc.boundary.db.CRUD.base_crud import BaseCRUD


class SessionCRUD(BaseCRUD[SessionModel]):
    """CRUD operations for SessionModel."""

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def get_by_invite_code(
        self,
        session: AsyncSession,
        invite_code: str,
    ) -> SessionModel | None:
        """
        Retrieve a session by its invite code.

        Args:
            session: Async database session
            invite_code: Invite token

        Returns:
            SessionModel if found, None otherwise
        """
        stmt = select(SessionModel).where(SessionModel.invite_code == invite_code)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_recent(
        self,
        session: AsyncSession,
        limit: int = 50,
    ) -> Sequence[SessionModel]:
        """
        Retrieve the most recently created sessions.

        Args:
            session: Async database session
            limit: Maximum number of sessions

        Returns:
            Sessions ordered by created_at descending
        """
        stmt = select(SessionModel).order_by(SessionModel.created_at.desc()).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def invite_code_exists(self, session: AsyncSession, invite_code: str) -> bool:
        return await self._count(session, SessionModel.invite_code == invite_code) > 0


session_crud = SessionCRUD()
