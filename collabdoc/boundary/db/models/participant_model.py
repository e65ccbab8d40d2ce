"""
Participant ORM model.

A participant is a session member, human or AI agent, identified by a
pseudo that is unique within the session. Presence is derived from
last_seen_at.

Dependencies: sqlalchemy, collabdoc.boundary.db.base
System role: Participant and presence persistence
"""

import uuid
from datetime import datetime, timedelta

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from collabdoc.boundary.db.base import Base, UUIDMixin, TimestampMixin, ensure_utc, utcnow

ONLINE_WINDOW_SECONDS = 30

PARTICIPANT_COLORS = (
    "#3B82F6",
    "#EF4444",
    "#10B981",
    "#F59E0B",
    "#8B5CF6",
    "#EC4899",
    "#06B6D4",
    "#84CC16",
    "#F97316",
    "#6366F1",
)


class ParticipantModel(Base, UUIDMixin, TimestampMixin):
    """
    Participant ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Owning session (CASCADE on session deletion)
        pseudo: Display name, unique per session
        color: Hex colour used for cursors and avatars
        is_agent: True for AI agents
        last_seen_at: Last heartbeat or document view (UTC)
        current_document_id: Document currently viewed, if any

    Constraints:
        (session_id, pseudo): UNIQUE
    """

    __tablename__ = "participants"
    __table_args__ = (
        UniqueConstraint("session_id", "pseudo", name="uq_participant_session_pseudo"),
    )

    session_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    pseudo: Mapped[str] = mapped_column(String(100), nullable=False)

    color: Mapped[str] = mapped_column(String(7), nullable=False, default=PARTICIPANT_COLORS[0])

    is_agent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    last_seen_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    current_document_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
        default=None,
    )

    def is_online(self, now: datetime | None = None) -> bool:
        """True when last seen within the presence window."""
        last_seen = ensure_utc(self.last_seen_at)
        if last_seen is None:
            return False
        now = now or utcnow()
        return last_seen > now - timedelta(seconds=ONLINE_WINDOW_SECONDS)
