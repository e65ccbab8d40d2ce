"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from collabdoc.boundary.db.CRUD import session_crud, document_crud

    # Use singleton instances
    session = await session_crud.get_by_id(db, session_id)
"""

from collabdoc.boundary.db.CRUD.base_crud import BaseCRUD
from collabdoc.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from collabdoc.boundary.db.CRUD.participant_crud import ParticipantCRUD, participant_crud
from collabdoc.boundary.db.CRUD.document_crud import (
    DocumentCRUD,
    DocumentVersionCRUD,
    document_crud,
    document_version_crud,
)
from collabdoc.boundary.db.CRUD.annotation_crud import (
    AnnotationCRUD,
    AnnotationFilters,
    annotation_crud,
)
from collabdoc.boundary.db.CRUD.decision_crud import (
    DecisionCRUD,
    VoteCRUD,
    decision_crud,
    vote_crud,
)

__all__ = [
    "BaseCRUD",
    "SessionCRUD",
    "session_crud",
    "ParticipantCRUD",
    "participant_crud",
    "DocumentCRUD",
    "document_crud",
    "DocumentVersionCRUD",
    "document_version_crud",
    "AnnotationCRUD",
    "AnnotationFilters",
    "annotation_crud",
    "DecisionCRUD",
    "decision_crud",
    "VoteCRUD",
    "vote_crud",
]
