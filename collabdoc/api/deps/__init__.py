"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_agent_service,
    get_annotation_service,
    get_decision_service,
    get_document_service,
    get_export_service,
    get_mercure_publisher,
    get_service_cache,
    get_session_service,
    get_settings_dependency,
)

__all__ = [
    "get_agent_service",
    "get_annotation_service",
    "get_decision_service",
    "get_document_service",
    "get_export_service",
    "get_mercure_publisher",
    "get_service_cache",
    "get_session_service",
    "get_settings_dependency",
]
