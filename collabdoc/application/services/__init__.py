"""
Application services.

Use case orchestration on top of the CRUD layer; each service commits its
own unit of work and publishes change notifications afterwards.
"""

from collabdoc.application.services.agent_service import AgentService
from collabdoc.application.services.annotation_service import AnnotationService
from collabdoc.application.services.base_service import BaseService
from collabdoc.application.services.decision_service import DecisionService
from collabdoc.application.services.document_service import DocumentService, slugify
from collabdoc.application.services.export_service import ExportService
from collabdoc.application.services.session_service import SessionService

__all__ = [
    "AgentService",
    "AnnotationService",
    "BaseService",
    "DecisionService",
    "DocumentService",
    "ExportService",
    "SessionService",
    "slugify",
]
