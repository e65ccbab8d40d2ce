"""
Session ORM model.

A session is the root aggregate of the collaborative workspace: documents,
participants and decisions all reference it by foreign key.

Dependencies: sqlalchemy, collabdoc.boundary.db.base
System role: Session persistence
"""

import enum
import secrets

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from collabdoc.boundary.db.base import Base, UUIDMixin, TimestampMixin


class SessionStatus(str, enum.Enum):
    """
    Session lifecycle states.

    PREPARATION: Created, content being drafted
    EN_COURS: Collaboration in progress
    TERMINE: Work finished
    ARCHIVE: Read-only archive, new joins rejected
    """

    PREPARATION = "preparation"
    EN_COURS = "en_cours"
    TERMINE = "termine"
    ARCHIVE = "archive"


def generate_invite_code() -> str:
    """32 hex characters from 16 random bytes."""
    return secrets.token_hex(16)


class SessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Session ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        title: Session title (255 char limit)
        description: Optional free-text description
        status: One of SessionStatus values
        invite_code: Random token granting join access (unique)
        created_at: Session creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    __tablename__ = "sessions"

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SessionStatus.PREPARATION.value,
    )

    invite_code: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        default=generate_invite_code,
        doc="Invite token shared with participants",
    )

    @property
    def is_archived(self) -> bool:
        return self.status == SessionStatus.ARCHIVE.value
