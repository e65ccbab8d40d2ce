"""
Dependency injection container.

Factory functions for FastAPI dependencies. Services are built per request
around the request's database session and the shared Mercure publisher.

Dependencies: collabdoc.configs, collabdoc.application, collabdoc.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.application.services import (
    AgentService,
    AnnotationService,
    DecisionService,
    DocumentService,
    ExportService,
    SessionService,
)
from collabdoc.boundary.db import get_async_db
from collabdoc.boundary.notifications import MercurePublisher
from collabdoc.configs import Settings, get_settings


class ServiceCache:
    """Container for process-wide shared instances."""

    def __init__(self):
        self._mercure_publisher = None

    @property
    def mercure_publisher(self) -> MercurePublisher:
        """Get cached Mercure publisher."""
        if self._mercure_publisher is None:
            self._mercure_publisher = MercurePublisher(get_settings().mercure)
        return self._mercure_publisher

    async def aclose(self) -> None:
        """Close the publisher's HTTP client and forget cached instances."""
        if self._mercure_publisher is not None:
            await self._mercure_publisher.aclose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._mercure_publisher = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_mercure_publisher() -> MercurePublisher:
    return get_service_cache().mercure_publisher


def get_session_service(
    db: AsyncSession = Depends(get_async_db),
    publisher: MercurePublisher = Depends(get_mercure_publisher),
) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)
        publisher: Shared Mercure publisher (injected via Depends)

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db, publisher=publisher)


def get_document_service(
    db: AsyncSession = Depends(get_async_db),
    publisher: MercurePublisher = Depends(get_mercure_publisher),
) -> DocumentService:
    return DocumentService(db=db, publisher=publisher)


def get_annotation_service(
    db: AsyncSession = Depends(get_async_db),
    publisher: MercurePublisher = Depends(get_mercure_publisher),
) -> AnnotationService:
    return AnnotationService(db=db, publisher=publisher)


def get_decision_service(
    db: AsyncSession = Depends(get_async_db),
    publisher: MercurePublisher = Depends(get_mercure_publisher),
) -> DecisionService:
    return DecisionService(db=db, publisher=publisher)


def get_export_service(
    db: AsyncSession = Depends(get_async_db),
    publisher: MercurePublisher = Depends(get_mercure_publisher),
) -> ExportService:
    return ExportService(db=db, publisher=publisher)


def get_agent_service(
    db: AsyncSession = Depends(get_async_db),
    publisher: MercurePublisher = Depends(get_mercure_publisher),
) -> AgentService:
    """
    Get agent facade instance.

    Returns:
        AgentService: Document, annotation and decision services sharing one session
    """
    return AgentService(db=db, publisher=publisher)
