"""
Tests for the agent-side API client, against an httpx MockTransport.
"""

import json

import httpx
import pytest

from collabdoc.agent.client import NO_ACTIVE_SESSION, CollabDocAPIError, CollabDocClient

SESSION_ID = "3f0c9a4e-1b7d-4c2e-9d7a-5e8f6a1b2c3d"
AGENT_ID = "8a1d2c3b-4e5f-4a6b-8c7d-9e0f1a2b3c4d"


class Recorder:
    """MockTransport handler recording requests and replaying canned responses."""

    def __init__(self, responses):
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.get(
            (request.method, request.url.path), httpx.Response(404, json={"detail": "Not Found"})
        )


@pytest.fixture
def recorder():
    return Recorder({
        ("POST", "/api/v1/sessions/agent/create"): httpx.Response(201, json={
            "session": {"id": SESSION_ID, "title": "Sprint Review", "invite_code": "ABCD2345"},
            "agent": {"participant_id": AGENT_ID, "pseudo": "Claude Assistant", "color": "#3B82F6"},
            "endpoints": {},
            "invite_url": "http://localhost:3000/session/join?code=ABCD2345",
        }),
        ("POST", "/api/v1/sessions/join/ABCD2345"): httpx.Response(200, json={
            "session": {"id": SESSION_ID},
            "participant": {"id": AGENT_ID, "pseudo": "Bot"},
        }),
        ("POST", f"/api/v1/mcp/sessions/{SESSION_ID}/documents"): httpx.Response(
            201, json={"id": "doc-1", "title": "Synthèse"}
        ),
        ("GET", f"/api/v1/mcp/sessions/{SESSION_ID}/annotations"): httpx.Response(
            200, json={"annotations": []}
        ),
        ("DELETE", "/api/v1/mcp/documents/doc-1"): httpx.Response(204),
        ("POST", "/api/v1/decisions/dec-1/vote"): httpx.Response(
            409, json={"detail": "Cette décision est verrouillée."}
        ),
        ("GET", "/api/v1/sessions"): httpx.Response(502, text="Bad Gateway"),
    })


@pytest.fixture
async def client(recorder):
    client = CollabDocClient(
        base_url="http://collabdoc.test/", transport=httpx.MockTransport(recorder)
    )
    yield client
    await client.aclose()


async def test_create_session_sets_context(client, recorder):
    await client.create_session("Sprint Review", agent_name="Claude Assistant")

    assert client.context.session_id == SESSION_ID
    assert client.context.participant_id == AGENT_ID
    assert client.context.pseudo == "Claude Assistant"
    body = json.loads(recorder.requests[0].content)
    assert body == {"title": "Sprint Review", "agent_name": "Claude Assistant"}
    assert "X-Agent-Id" not in recorder.requests[0].headers


async def test_join_session_sends_agent_flag(client, recorder):
    await client.join_session("ABCD2345", "Bot")

    assert json.loads(recorder.requests[0].content) == {"pseudo": "Bot", "is_agent": True}
    assert client.context.participant_id == AGENT_ID


async def test_requests_carry_agent_header(client, recorder):
    await client.create_session("Sprint Review")

    await client.create_document("Synthèse", "Contenu", doc_type="synthesis")

    request = recorder.requests[-1]
    assert request.headers["X-Agent-Id"] == AGENT_ID
    assert json.loads(request.content) == {
        "title": "Synthèse",
        "content": "Contenu",
        "type": "synthesis",
        "participant_id": AGENT_ID,
    }


async def test_none_params_are_dropped(client, recorder):
    await client.create_session("Sprint Review")

    await client.list_annotations(annotation_type="question")

    assert recorder.requests[-1].url.params == httpx.QueryParams({"type": "question"})


async def test_no_content_returns_none(client):
    await client.create_session("Sprint Review")

    assert await client.delete_document("doc-1") is None


async def test_error_detail_is_raised(client):
    await client.create_session("Sprint Review")

    with pytest.raises(CollabDocAPIError) as exc_info:
        await client.vote("dec-1", "o1")

    assert str(exc_info.value) == "Cette décision est verrouillée."
    assert exc_info.value.status_code == 409


async def test_non_json_error_uses_body(client):
    with pytest.raises(CollabDocAPIError) as exc_info:
        await client.list_sessions()

    assert str(exc_info.value) == "Bad Gateway"
    assert exc_info.value.status_code == 502


async def test_session_required(client, recorder):
    with pytest.raises(CollabDocAPIError, match=NO_ACTIVE_SESSION):
        await client.get_session_status()

    assert recorder.requests == []


async def test_transport_failure_is_wrapped():
    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = CollabDocClient(
        base_url="http://collabdoc.test", transport=httpx.MockTransport(unreachable)
    )
    try:
        with pytest.raises(CollabDocAPIError, match="Request failed"):
            await client.list_sessions()
    finally:
        await client.aclose()
