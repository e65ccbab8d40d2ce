"""
Tests for the MCP tool adapter.
"""

import pytest

from collabdoc.agent.client import CollabDocClient
from collabdoc.agent.mcp_server import arbitrations_summary, build_server

EXPECTED_TOOLS = {
    "list_sessions",
    "create_session",
    "join_session",
    "get_session_status",
    "list_documents",
    "read_document",
    "create_document",
    "update_document",
    "delete_document",
    "list_annotations",
    "respond_to_annotation",
    "resolve_annotation",
    "create_decision",
    "list_decisions",
    "vote_on_decision",
    "delete_decision",
    "get_arbitrations",
}


@pytest.fixture
async def client():
    client = CollabDocClient(base_url="http://collabdoc.test")
    yield client
    await client.aclose()


async def test_all_tools_registered(client):
    server = build_server(client)

    tools = await server.list_tools()

    assert {tool.name for tool in tools} == EXPECTED_TOOLS
    assert all(tool.description for tool in tools)


def test_summary_without_arbitrations():
    assert arbitrations_summary([]) == (
        "## Arbitrages validés (0)\n\n_Aucun arbitrage validé pour le moment._\n"
    )


def test_summary_lists_selected_options():
    summary = arbitrations_summary([
        {
            "title": "Base de données",
            "description": "Choix du moteur",
            "selected_option": {"id": "o1", "label": "Postgres", "description": "JSONB natif"},
            "vote_count": 3,
            "validated_at": "2025-03-14T09:30:00+00:00",
        },
        {
            "title": "Hébergement",
            "description": None,
            "selected_option": None,
            "vote_count": 0,
            "validated_at": None,
        },
    ])

    assert summary.startswith("## Arbitrages validés (2)\n\n")
    assert (
        "### 1. Base de données\nChoix du moteur\n**Choix retenu:** Postgres\n> JSONB natif\n"
        "_3 vote(s) - Validé le 14/03/2025_\n"
    ) in summary
    assert "### 2. Hébergement\n**Choix retenu:** N/A\n_0 vote(s) - Validé le N/A_\n" in summary
