"""
Fixtures for router tests.

Routers are mounted on a bare FastAPI app and services replaced by
AsyncMock instances through dependency_overrides.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest

NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_session():
    def _make(**overrides):
        values = {
            "id": uuid4(),
            "title": "Sprint Review",
            "description": None,
            "status": "preparation",
            "invite_code": "ABCD2345",
            "created_at": NOW,
            "updated_at": NOW,
            "is_archived": False,
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make


@pytest.fixture
def make_participant():
    def _make(**overrides):
        values = {
            "id": uuid4(),
            "session_id": uuid4(),
            "pseudo": "alice",
            "color": "#3B82F6",
            "is_agent": False,
            "current_document_id": None,
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make


@pytest.fixture
def make_document():
    def _make(**overrides):
        values = {
            "id": uuid4(),
            "session_id": uuid4(),
            "title": "Plan",
            "slug": "plan",
            "type": "general",
            "parent_id": None,
            "sort_order": 0,
            "current_version": 1,
            "content": "# Plan",
            "doc_metadata": None,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make
