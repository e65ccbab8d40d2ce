"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database session, publisher mock, service and entity factories
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from collabdoc.boundary.db.base import Base
    import collabdoc.boundary.db.models  # noqa: F401  (register tables)

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def mock_publisher():
    """
    Create mock MercurePublisher.

    Returns:
        AsyncMock: Every publish_* coroutine records its calls
    """
    from collabdoc.boundary.notifications import MercurePublisher

    return AsyncMock(spec=MercurePublisher)


@pytest.fixture
def session_service(test_async_db, mock_publisher):
    from collabdoc.application.services import SessionService

    return SessionService(test_async_db, mock_publisher)


@pytest.fixture
def document_service(test_async_db, mock_publisher):
    from collabdoc.application.services import DocumentService

    return DocumentService(test_async_db, mock_publisher)


@pytest.fixture
def annotation_service(test_async_db, mock_publisher):
    from collabdoc.application.services import AnnotationService

    return AnnotationService(test_async_db, mock_publisher)


@pytest.fixture
def decision_service(test_async_db, mock_publisher):
    from collabdoc.application.services import DecisionService

    return DecisionService(test_async_db, mock_publisher)


@pytest.fixture
def export_service(test_async_db, mock_publisher):
    from collabdoc.application.services import ExportService

    return ExportService(test_async_db, mock_publisher)


@pytest.fixture
def agent_service(test_async_db, mock_publisher):
    from collabdoc.application.services import AgentService

    return AgentService(test_async_db, mock_publisher)


@pytest.fixture
async def sample_session(session_service):
    """Session "Sprint Review" in preparation status."""
    return await session_service.create_session("Sprint Review", "Revue de fin de sprint")


@pytest.fixture
async def alice(session_service, sample_session):
    return await session_service.join_session(sample_session, "alice")


@pytest.fixture
async def bob(session_service, sample_session):
    return await session_service.join_session(sample_session, "bob")


@pytest.fixture
async def agent(session_service, sample_session):
    return await session_service.join_session(sample_session, "Claude Assistant", is_agent=True)


@pytest.fixture
async def sample_document(document_service, sample_session, alice):
    """Root document "Plan" authored by alice."""
    return await document_service.create(
        sample_session,
        {"title": "Plan", "content": "# Plan\n\nPremière version"},
        alice,
    )
