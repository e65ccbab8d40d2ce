"""
Database models package.

Exports:
  - SessionModel, SessionStatus: Session aggregate root
  - ParticipantModel: Session members and presence
  - DocumentModel, DocumentVersionModel, DocumentType: Document tree and versions
  - AnnotationModel, AnnotationType, AnnotationStatus: Threaded annotations
  - DecisionModel, VoteModel, DecisionStatus: Decisions and votes

Dependencies: sqlalchemy, collabdoc.boundary.db.base
System role: Database model definitions for domain entities
"""

from collabdoc.boundary.db.models.session_model import SessionModel, SessionStatus
from collabdoc.boundary.db.models.participant_model import ParticipantModel
from collabdoc.boundary.db.models.document_model import (
    DocumentModel,
    DocumentType,
    DocumentVersionModel,
)
from collabdoc.boundary.db.models.annotation_model import (
    AnnotationModel,
    AnnotationStatus,
    AnnotationType,
)
from collabdoc.boundary.db.models.decision_model import (
    DecisionModel,
    DecisionStatus,
    VoteModel,
)

__all__ = [
    "SessionModel",
    "SessionStatus",
    "ParticipantModel",
    "DocumentModel",
    "DocumentType",
    "DocumentVersionModel",
    "AnnotationModel",
    "AnnotationStatus",
    "AnnotationType",
    "DecisionModel",
    "DecisionStatus",
    "VoteModel",
]
