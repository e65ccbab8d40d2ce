"""
Test suite for dependency injection container.

Tests factory functions for service creation and the shared publisher cache.

System role: Verification of DI container
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from collabdoc.api.deps import (
    get_agent_service,
    get_annotation_service,
    get_decision_service,
    get_document_service,
    get_export_service,
    get_session_service,
)
from collabdoc.api.deps.dependencies import ServiceCache, get_mercure_publisher, get_service_cache
from collabdoc.application.services import (
    AgentService,
    AnnotationService,
    DecisionService,
    DocumentService,
    ExportService,
    SessionService,
)


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def mock_publisher() -> MagicMock:
    return MagicMock()


@pytest.mark.parametrize(
    ("factory", "service_class"),
    [
        (get_session_service, SessionService),
        (get_document_service, DocumentService),
        (get_annotation_service, AnnotationService),
        (get_decision_service, DecisionService),
        (get_export_service, ExportService),
        (get_agent_service, AgentService),
    ],
)
def test_factory_builds_service_around_request_session(
    factory, service_class, mock_db_session, mock_publisher
) -> None:
    service = factory(db=mock_db_session, publisher=mock_publisher)

    assert isinstance(service, service_class)
    assert service.db is mock_db_session
    assert service.publisher is mock_publisher


def test_agent_service_shares_session_with_sub_services(mock_db_session, mock_publisher) -> None:
    service = get_agent_service(db=mock_db_session, publisher=mock_publisher)

    assert service.documents.db is mock_db_session
    assert service.annotations.db is mock_db_session
    assert service.decisions.publisher is mock_publisher


class TestServiceCache:
    """Test suite for the process-wide publisher cache."""

    def test_publisher_is_created_once(self) -> None:
        cache = ServiceCache()
        with patch("collabdoc.api.deps.dependencies.MercurePublisher") as publisher_class:
            first = cache.mercure_publisher
            second = cache.mercure_publisher

        assert first is second
        publisher_class.assert_called_once()

    async def test_aclose_closes_and_forgets_publisher(self) -> None:
        cache = ServiceCache()
        with patch("collabdoc.api.deps.dependencies.MercurePublisher") as publisher_class:
            publisher_class.return_value.aclose = AsyncMock()
            publisher = cache.mercure_publisher

            await cache.aclose()

            publisher.aclose.assert_awaited_once()
            assert cache._mercure_publisher is None

    async def test_aclose_without_publisher_is_noop(self) -> None:
        await ServiceCache().aclose()

    def test_get_mercure_publisher_uses_global_cache(self) -> None:
        with patch("collabdoc.api.deps.dependencies.MercurePublisher"):
            try:
                assert get_mercure_publisher() is get_service_cache().mercure_publisher
            finally:
                get_service_cache().clear()
