"""
Decision and vote ORM models.

A decision offers an ordered list of options (stored as JSON) that
participants vote on; validating it locks further votes.

Dependencies: sqlalchemy, collabdoc.boundary.db.base
System role: Decision and vote persistence
"""

import enum
import uuid

from sqlalchemy import Boolean, ForeignKey, JSON, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from collabdoc.boundary.db.base import Base, UUIDMixin, TimestampMixin


class DecisionStatus(str, enum.Enum):
    """
    Decision states.

    OUVERT: Open for votes
    EN_DISCUSSION: Being debated
    CONSENSUS: Consensus reached, awaiting validation
    VALIDE: Validated and locked
    REPORTE: Postponed, unlocked
    """

    OUVERT = "ouvert"
    EN_DISCUSSION = "en_discussion"
    CONSENSUS = "consensus"
    VALIDE = "valide"
    REPORTE = "reporte"


class DecisionModel(Base, UUIDMixin, TimestampMixin):
    """
    Decision ORM model.

    Attributes:
        session_id: Owning session (CASCADE on session deletion)
        linked_document_id: Related document (SET NULL on document deletion)
        title: Decision title
        description: Optional context
        status: One of DecisionStatus values
        options: Ordered list of {"id", "label", "description"} dicts
        selected_option_id: Option chosen on validation
        is_locked: True once validated; only postponing unlocks
    """

    __tablename__ = "decisions"

    session_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    linked_document_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DecisionStatus.OUVERT.value,
    )

    options: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    selected_option_id: Mapped[str | None] = mapped_column(String(36), nullable=True, default=None)

    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def get_option(self, option_id: str | None) -> dict | None:
        """Return the option dict with the given id, if any."""
        for option in self.options or []:
            if option.get("id") == option_id:
                return option
        return None

    def has_option(self, option_id: str | None) -> bool:
        return self.get_option(option_id) is not None


class VoteModel(Base, UUIDMixin, TimestampMixin):
    """
    Vote ORM model.

    Constraints:
        (decision_id, participant_id): UNIQUE, one vote per participant
    """

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("decision_id", "participant_id", name="uq_vote_decision_participant"),
    )

    decision_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("decisions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    participant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("participants.id", ondelete="CASCADE"),
        nullable=False,
    )

    option_id: Mapped[str] = mapped_column(String(36), nullable=False)

    comment: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
