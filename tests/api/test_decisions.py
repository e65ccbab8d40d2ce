from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from collabdoc.api.deps import get_decision_service
from collabdoc.api.routers import decisions_router
from collabdoc.core.exceptions import ConflictError, LockedDecisionError

NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def app():
    app = FastAPI()
    app.include_router(decisions_router)
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def mock_decision_service(client):
    service = AsyncMock()
    client.app.dependency_overrides[get_decision_service] = lambda: service
    return service


@pytest.fixture
def decision():
    return SimpleNamespace(id=uuid4(), session_id=uuid4(), is_locked=False)


def _serialized(decision, **overrides):
    data = {
        "id": str(decision.id),
        "session_id": str(decision.session_id),
        "title": "Base de données",
        "description": None,
        "status": "ouvert",
        "options": [{"id": "o1", "label": "Postgres"}, {"id": "o2", "label": "MySQL"}],
        "selected_option_id": None,
        "is_locked": False,
        "vote_stats": {"o1": 0, "o2": 0},
        "vote_count": 0,
        "linked_document_id": None,
        "created_at": NOW.isoformat(),
        "updated_at": NOW.isoformat(),
    }
    data.update(overrides)
    return data


def test_create_decision_normalizes_options(client, mock_decision_service, make_session, decision):
    session = make_session()
    mock_decision_service.get_session_or_raise.return_value = session
    mock_decision_service.create.return_value = decision
    mock_decision_service.serialize.return_value = _serialized(decision)

    response = client.post(
        "/decisions",
        json={
            "session_id": str(session.id),
            "title": " Base de données ",
            "options": ["Postgres", {"text": "MySQL", "description": "Connu"}],
        },
    )

    assert response.status_code == 201
    args = mock_decision_service.create.await_args.args
    assert args[1] == "Base de données"
    assert args[2] == [
        {"label": "Postgres", "description": None},
        {"label": "MySQL", "description": "Connu"},
    ]
    assert args[4] is None
    mock_decision_service.find_document.assert_not_called()


def test_create_decision_requires_two_options(client, mock_decision_service, make_session):
    response = client.post(
        "/decisions",
        json={"session_id": str(make_session().id), "title": "Choix", "options": ["Seule"]},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Au moins 2 options sont requises"
    mock_decision_service.create.assert_not_called()


def test_create_decision_rejects_option_without_label(client, mock_decision_service, make_session):
    response = client.post(
        "/decisions",
        json={
            "session_id": str(make_session().id),
            "title": "Choix",
            "options": ["A", {"description": "Sans libellé"}, "  "],
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Chaque option doit avoir un libellé"
    mock_decision_service.create.assert_not_called()


def test_create_decision_ignores_unknown_linked_document(
    client, mock_decision_service, make_session, decision
):
    session = make_session()
    mock_decision_service.get_session_or_raise.return_value = session
    mock_decision_service.find_document.return_value = None
    mock_decision_service.create.return_value = decision
    mock_decision_service.serialize.return_value = _serialized(decision)

    response = client.post(
        "/decisions",
        json={
            "session_id": str(session.id),
            "title": "Choix",
            "options": ["A", "B"],
            "linked_document_id": str(uuid4()),
        },
    )

    assert response.status_code == 201
    assert mock_decision_service.create.await_args.args[4] is None


def test_vote(client, mock_decision_service, make_participant, decision):
    participant = make_participant()
    vote = SimpleNamespace(id=uuid4(), option_id="o1", comment=None, participant_id=participant.id)
    mock_decision_service.get_decision_or_raise.return_value = decision
    mock_decision_service.get_participant_or_raise.return_value = participant
    mock_decision_service.vote.return_value = vote
    mock_decision_service.get_vote_stats.return_value = {"o1": 1, "o2": 0}

    response = client.post(
        f"/decisions/{decision.id}/vote",
        json={"participant_id": str(participant.id), "option_id": "o1"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["vote"]["option_id"] == "o1"
    assert data["stats"] == {"o1": 1, "o2": 0}


def test_vote_on_locked_decision(client, mock_decision_service, make_participant, decision):
    mock_decision_service.get_decision_or_raise.return_value = decision
    mock_decision_service.get_participant_or_raise.return_value = make_participant()
    mock_decision_service.vote.side_effect = LockedDecisionError(decision.id)

    response = client.post(
        f"/decisions/{decision.id}/vote",
        json={"participant_id": str(uuid4()), "option_id": "o1"},
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Cette décision est verrouillée."


def test_concurrent_vote_conflict(client, mock_decision_service, make_participant, decision):
    mock_decision_service.get_decision_or_raise.return_value = decision
    mock_decision_service.get_participant_or_raise.return_value = make_participant()
    mock_decision_service.vote.side_effect = ConflictError("Vote concurrent détecté")

    response = client.post(
        f"/decisions/{decision.id}/vote",
        json={"participant_id": str(uuid4()), "option_id": "o1"},
    )

    assert response.status_code == 409


def test_vote_requires_option(client, mock_decision_service, decision):
    mock_decision_service.get_decision_or_raise.return_value = decision

    response = client.post(f"/decisions/{decision.id}/vote", json={"participant_id": str(uuid4())})

    assert response.status_code == 400
    assert response.json()["detail"] == "option_id est requis"


def test_remove_vote_requires_participant(client, mock_decision_service, decision):
    mock_decision_service.get_decision_or_raise.return_value = decision

    response = client.delete(f"/decisions/{decision.id}/vote")

    assert response.status_code == 400
    assert response.json()["detail"] == "participant_id est requis"


def test_remove_vote(client, mock_decision_service, make_participant, decision):
    participant = make_participant()
    mock_decision_service.get_decision_or_raise.return_value = decision
    mock_decision_service.get_participant_or_raise.return_value = participant
    mock_decision_service.get_vote_stats.return_value = {"o1": 0, "o2": 0}

    response = client.delete(f"/decisions/{decision.id}/vote?participant_id={participant.id}")

    assert response.status_code == 200
    assert response.json() == {"vote": None, "stats": {"o1": 0, "o2": 0}}
    mock_decision_service.remove_vote.assert_awaited_once_with(decision, participant)


def test_update_status_rejects_unknown(client, mock_decision_service, decision):
    mock_decision_service.get_decision_or_raise.return_value = decision

    response = client.patch(f"/decisions/{decision.id}/status", json={"status": "ferme"})

    assert response.status_code == 400
    mock_decision_service.update_status.assert_not_called()


def test_validate_decision(client, mock_decision_service, decision):
    mock_decision_service.get_decision_or_raise.return_value = decision
    mock_decision_service.validate.return_value = decision
    mock_decision_service.serialize.return_value = _serialized(
        decision, status="valide", selected_option_id="o1", is_locked=True
    )

    response = client.post(f"/decisions/{decision.id}/validate", json={"selected_option_id": "o1"})

    assert response.status_code == 200
    assert response.json()["is_locked"] is True
    mock_decision_service.validate.assert_awaited_once_with(decision, "o1")


def test_delete_decision(client, mock_decision_service, decision):
    mock_decision_service.get_decision_or_raise.return_value = decision

    response = client.delete(f"/decisions/{decision.id}")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    mock_decision_service.delete.assert_awaited_once_with(decision)


def test_status_reporte_does_not_unlock(client, mock_decision_service, decision):
    decision.is_locked = True
    mock_decision_service.get_decision_or_raise.return_value = decision
    mock_decision_service.update_status.return_value = decision
    mock_decision_service.serialize.return_value = _serialized(
        decision, status="reporte", selected_option_id="o1", is_locked=True
    )

    response = client.patch(f"/decisions/{decision.id}/status", json={"status": "reporte"})

    assert response.status_code == 200
    assert response.json()["is_locked"] is True
    mock_decision_service.update_status.assert_awaited_once_with(decision, "reporte")
    mock_decision_service.postpone.assert_not_called()
