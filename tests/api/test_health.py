from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from collabdoc.api.routers import health_router
from collabdoc.boundary.db import get_async_db


@pytest.fixture
def app():
    app = FastAPI()
    app.include_router(health_router)
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(client):
    db = AsyncMock()
    client.app.dependency_overrides[get_async_db] = lambda: db

    response = client.get("/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}
    db.execute.assert_awaited_once()


def test_health_check_db_unavailable(client):
    db = AsyncMock()
    db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    client.app.dependency_overrides[get_async_db] = lambda: db

    response = client.get("/health/db")

    assert response.status_code == 503
    assert response.json()["detail"] == "Database unavailable"
